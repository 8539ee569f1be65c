from pydantic import BaseModel

# Ids are bigserial; anything outside int8 cannot name a row.
MAX_ID = 2**63 - 1


class MessageResponse(BaseModel):
    message: str
