from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator

from app.utils.timeutils import ensure_aware

UTCDateTime = Annotated[datetime, AfterValidator(ensure_aware)]
