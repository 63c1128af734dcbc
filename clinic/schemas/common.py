import datetime as dt
from typing import Annotated

from pydantic import PlainSerializer

# Times travel as "HH:MM" on the wire
ClockTime = Annotated[
    dt.time, PlainSerializer(lambda value: value.strftime("%H:%M"), return_type=str)
]
