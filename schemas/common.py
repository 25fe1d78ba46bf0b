from pydantic import BaseModel, ConfigDict


class UnauthorizedResponse(BaseModel):
    message: str = "Unauthorized"


class BadRequestResponse(BaseModel):
    message: str


class ValidationErrorResponseDetail(BaseModel):
    field: str
    message: str


class ValidationErrorResponse(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "message": "Validation error on request data.",
                "errors": [
                    {
                        "field": "amount",
                        "message": "Input should be a valid decimal",
                    },
                ],
            }
        },
    )

    message: str
    errors: list[ValidationErrorResponseDetail]


class ForbiddenResponse(BaseModel):
    message: str = "You don't have permissions to perform this action"


class NotFoundResponse(BaseModel):
    message: str = "Not Found"


class ConflictResponse(BaseModel):
    message: str


class InternalServerErrorResponse(BaseModel):
    detail: str
