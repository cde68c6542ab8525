from pydantic import BaseModel

class TokenPayload(BaseModel):
    sub: str | None = None
    jti: str | None = None
    exp: int | None = None

    @property
    def user_id(self) -> int | None:
        return int(self.sub) if self.sub and self.sub.isdigit() else None
