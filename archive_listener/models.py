"""Wire Models - JSON request and response shapes of the listener"""

from pydantic import BaseModel, ConfigDict, Field


class MoveRequest(BaseModel):
    """Body of a move request: {"src": ..., "dst": ...}"""

    model_config = ConfigDict(populate_by_name=True)

    source_path: str = Field("", alias="src")
    destination_path: str = Field("", alias="dst")


class SizeRequest(BaseModel):
    """Body of a size request: {"src": ...}"""

    model_config = ConfigDict(populate_by_name=True)

    source_path: str = Field("", alias="src")


class Answer(BaseModel):
    """Response of every endpoint: {"Message": ..., "Body": ...}"""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field("", alias="Message")
    body: str = Field("", alias="Body")

    def to_wire(self) -> dict:
        """Dump with the wire field names"""
        return self.model_dump(by_alias=True)
