"""
Use cases for the motorcycle records.

Every interactor runs the same pipeline: authenticate, authorize, execute
the repository operation, save, respond. A failure at any step ends the
pipeline and is reported in the response; a failed execution never reaches
the save step and nothing before the execution touches the repository.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from .contracts import AuthService, MotorcycleRepository
from .entity import Motorcycle
from .enums import AuthorizationRole, OperationStatus
from .errors import (
    ConflictError,
    InternalError,
    MotorcycleError,
    NotAuthenticatedError,
    NotAuthorizedError,
    NotFoundError,
)
from .messages import (
    DeleteMotorcycleRequest,
    DeleteMotorcycleResponse,
    GetMotorcycleRequest,
    GetMotorcycleResponse,
    InsertMotorcycleRequest,
    InsertMotorcycleResponse,
    ListMotorcyclesRequest,
    ListMotorcyclesResponse,
    UpdateMotorcycleRequest,
    UpdateMotorcycleResponse,
)

logger = logging.getLogger(__name__)


class _Interactor(ABC):
    operation = ""
    response_class: Any = None
    required_role = AuthorizationRole.ADMIN

    def __init__(
        self,
        repository: Optional[MotorcycleRepository],
        auth_service: Optional[AuthService],
    ):
        if repository is None:
            raise ValueError(f"{type(self).__name__} requires a motorcycle repository")
        if auth_service is None:
            raise ValueError(f"{type(self).__name__} requires an auth service")
        self.repository = repository
        self.auth_service = auth_service

    def handle(self, request):
        """
        Perform the use case for ``request``.

        Returns:
            The use case's response message. Failures are reported through its
            ``status`` and ``error``; this method does not raise them.
        """
        try:
            self._check_access()
            payload = self._execute(request)
            self._save()
        except MotorcycleError as e:
            logger.warning(f"{self.operation} operation rejected: {e}")
            return self.response_class(status=e.status, error=e)
        except Exception:
            logger.exception(f"{self.operation} operation failed unexpectedly")
            error = InternalError(f"{self.operation} operation failed due to an internal error")
            return self.response_class(status=OperationStatus.INTERNAL_ERROR, error=error)

        logger.info(f"{self.operation} operation succeeded")
        return self.response_class(status=OperationStatus.OK, **payload)

    def _check_access(self) -> None:
        if not self.auth_service.is_authenticated():
            raise NotAuthenticatedError(
                f"{self.operation} operation failed due to not being authenticated"
            )
        if not self.auth_service.is_authorized(self.required_role):
            raise NotAuthorizedError(
                f"{self.operation} operation failed due to not being authorized, "
                "so please contact your system administrator"
            )

    @abstractmethod
    def _execute(self, request) -> Dict[str, Any]:
        """Run the repository operation and return the response payload fields."""

    def _save(self) -> None:
        try:
            self.repository.save()
        except InternalError:
            raise
        except Exception as e:
            logger.exception(f"Saving after the {self.operation} operation failed")
            raise InternalError(
                f"{self.operation} operation failed while saving the changes"
            ) from e


class InsertMotorcycleInteractor(_Interactor):
    operation = "insert"
    response_class = InsertMotorcycleResponse

    def handle(self, request: InsertMotorcycleRequest) -> InsertMotorcycleResponse:
        return super().handle(request)

    def _execute(self, request: InsertMotorcycleRequest) -> Dict[str, Any]:
        # Fail fast with a clearer message than the repository's own check.
        if self.repository.find_by_vin(request.vin) is not None:
            raise ConflictError(
                "insert operation failed due to a motorcycle with the same VIN "
                "already existing in the repository"
            )
        motorcycle = Motorcycle.create(
            make=request.make, model=request.model, year=request.year, vin=request.vin
        )
        motorcycle = self.repository.insert(motorcycle)
        return {"id": motorcycle.id}


class UpdateMotorcycleInteractor(_Interactor):
    operation = "update"
    response_class = UpdateMotorcycleResponse

    def handle(self, request: UpdateMotorcycleRequest) -> UpdateMotorcycleResponse:
        return super().handle(request)

    def _execute(self, request: UpdateMotorcycleRequest) -> Dict[str, Any]:
        motorcycle = Motorcycle.create(
            make=request.make, model=request.model, year=request.year, vin=request.vin
        )
        motorcycle = self.repository.update(request.id, motorcycle)
        return {"id": motorcycle.id}


class DeleteMotorcycleInteractor(_Interactor):
    operation = "delete"
    response_class = DeleteMotorcycleResponse

    def handle(self, request: DeleteMotorcycleRequest) -> DeleteMotorcycleResponse:
        return super().handle(request)

    def _execute(self, request: DeleteMotorcycleRequest) -> Dict[str, Any]:
        self.repository.delete(request.id)
        return {"id": request.id}


class GetMotorcycleInteractor(_Interactor):
    operation = "get"
    response_class = GetMotorcycleResponse

    def handle(self, request: GetMotorcycleRequest) -> GetMotorcycleResponse:
        return super().handle(request)

    def _execute(self, request: GetMotorcycleRequest) -> Dict[str, Any]:
        motorcycle = self.repository.find_by_id(request.id)
        if motorcycle is None:
            raise NotFoundError(
                f"get operation failed because the motorcycle with ID {request.id} was not found"
            )
        return {"motorcycle": motorcycle}


class ListMotorcyclesInteractor(_Interactor):
    operation = "list"
    response_class = ListMotorcyclesResponse

    def handle(self, request: ListMotorcyclesRequest) -> ListMotorcyclesResponse:
        return super().handle(request)

    def _execute(self, request: ListMotorcyclesRequest) -> Dict[str, Any]:
        return {"motorcycles": list(self.repository.list())}
