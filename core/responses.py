from abc import ABCMeta, abstractmethod
from typing import Any, Optional, Union
from fastapi import HTTPException
from fastapi.responses import JSONResponse, Response

from core.exceptions import PersistenceError, UpstreamError, VoucherFlowError
from settings import DEPLOYMENT_MODE


class HttpResponseAbstract(metaclass=ABCMeta):
    @abstractmethod
    def response(self) -> Union[JSONResponse, Response, None]:
        pass


class Ok(HttpResponseAbstract):
    def __init__(self, data: Optional[Any]) -> None:
        if data is not None:
            self.data = data
        else:
            self.data = ""

    def response(self) -> JSONResponse:
        """
        parse class to JSONReponse
        """
        return JSONResponse(content=self.data, status_code=200)


class Created(HttpResponseAbstract):
    def __init__(self, data: Optional[Any]) -> None:
        if data is not None:
            self.data = data
        else:
            self.data = ""

    def response(self) -> JSONResponse:
        """
        parse class to JSONReponse
        """
        return JSONResponse(content=self.data, status_code=201)


class Unauthorized(HttpResponseAbstract):
    def __init__(
        self, message: str = "Unauthorized", custom_response: Optional[str] = None
    ) -> None:
        """
        custom_response: override default json response
        default json response:
        json:{
            'message': 'Unauthorized'
        }
        status_code: 401
        """
        self.message = message
        self.custom_response = custom_response

    def response(self) -> JSONResponse:
        if self.custom_response is None:
            return JSONResponse(content={"message": f"{self.message}"}, status_code=401)
        return JSONResponse(content=self.custom_response, status_code=401)


class BadRequest(HttpResponseAbstract):
    def __init__(
        self, message: Optional[str] = None, custom_response: Optional[Any] = None
    ) -> None:
        """
        message: bad request message, for default json response
        custom_response: override default json response
        default json response:
        json:{
            'message': f'{message}'
        }
        status_code: 400
        """
        self.custom_response = None
        if custom_response is None:
            self.message = message
        else:
            self.custom_response = custom_response

    def response(self) -> JSONResponse:
        """
        parse class to JSONReponse
        """
        if self.custom_response is None:
            return JSONResponse(content={"message": self.message}, status_code=400)
        else:
            return JSONResponse(content=self.custom_response, status_code=400)


class Forbidden(HttpResponseAbstract):
    def __init__(
        self,
        message: str = "You don't have permissions to perform this action",
        custom_response: Optional[Any] = None,
    ) -> None:
        """
        custom_response: override default json response
        default json response:
        json:{
            'message': 'You don\'t have permissions to perform this action'
        }
        status_code: 403
        """
        self.custom_response = custom_response
        self.message = message

    def response(self) -> JSONResponse:
        """
        parse class to JSONReponse
        """
        if self.custom_response is None:
            return JSONResponse(content={"message": self.message}, status_code=403)
        else:
            return JSONResponse(content=self.custom_response, status_code=403)


class NotFound(HttpResponseAbstract):
    def __init__(
        self, message: str = "Not Found", custom_response: Optional[Any] = None
    ) -> None:
        """
        custom_response: override default json response
        default json response:
        json:{
            'message': 'Not Found'
        }
        status_code: 404
        """
        self.custom_response = None
        if custom_response is not None:
            self.custom_response = custom_response
        else:
            self.message = message

    def response(self) -> JSONResponse:
        """
        parse class to JSONReponse
        """
        if self.custom_response is None:
            return JSONResponse(content={"message": self.message}, status_code=404)
        else:
            return JSONResponse(content=self.custom_response, status_code=404)


class Conflict(HttpResponseAbstract):
    def __init__(
        self, message: str = "Conflict", custom_response: Optional[Any] = None
    ) -> None:
        """
        custom_response: override default json response
        default json response:
        json:{
            'message': 'Conflict'
        }
        status_code: 409
        """
        self.custom_response = None
        if custom_response is not None:
            self.custom_response = custom_response
        else:
            self.message = message

    def response(self) -> JSONResponse:
        """
        parse class to JSONReponse
        """
        if self.custom_response is None:
            return JSONResponse(content={"message": self.message}, status_code=409)
        else:
            return JSONResponse(content=self.custom_response, status_code=409)


class InternalServerError(HttpResponseAbstract):
    def __init__(
        self, error: Optional[str] = None, custom_response: Optional[Any] = None
    ) -> None:
        """
        error: error string for defaut json response
        custom_response: override default json response
        default json response:
        json:{
            'detail': 'Something wrong with server'
        }
        status_code: 500
        """
        self.custom_response = None
        if custom_response is not None:
            self.custom_response = custom_response
        else:
            self.error = error

    def response(self) -> JSONResponse:
        """
        parse class to JSONReponse
        """
        if self.custom_response is None:
            raise HTTPException(status_code=500, detail="Something wrong with server")
        else:
            raise HTTPException(status_code=500, detail=self.custom_response)


class VoucherFlowFailure(HttpResponseAbstract):
    def __init__(self, error: VoucherFlowError) -> None:
        """
        json response for errors of the voucher purchase flow:
        json:{
            'message': f'{error.message}',
            'details': ...  (development mode or client side errors only)
        }
        PersistenceError additionally carries voucher_code, paypal_order_id,
        amount and valid_until for manual reconciliation.
        """
        self.error = error

    def response(self) -> JSONResponse:
        content = {"message": self.error.message}
        show_details = (
            not isinstance(self.error, UpstreamError)
            or DEPLOYMENT_MODE == "development"
        )
        if show_details and self.error.details is not None:
            content["details"] = self.error.details
        if isinstance(self.error, PersistenceError):
            content.update(
                {
                    "voucher_code": self.error.voucher_code,
                    "paypal_order_id": self.error.paypal_order_id,
                    "amount": float(self.error.amount)
                    if self.error.amount is not None
                    else None,
                    "valid_until": self.error.valid_until.isoformat()
                    if self.error.valid_until is not None
                    else None,
                    "reconciliation_id": self.error.reconciliation_id,
                }
            )
        return JSONResponse(content=content, status_code=self.error.status_code)


def common_response(res: HttpResponseAbstract):
    return res.response()
