from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Human readable reason the backup could not answer.")


class ApiConfig(BaseModel):
    mode: str = Field(..., description="external or local")
    baseUrl: str

    def to_script(self) -> str:
        return f"window.API_CONFIG = {self.model_dump_json()};\n"
