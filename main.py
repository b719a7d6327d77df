from io import BytesIO
import logging

import pandas as pd
import pyarrow.parquet as pq
import pyarrow as pa
from fastapi import FastAPI, HTTPException, Response, Depends, status
from fastapi.openapi.docs import get_swagger_ui_html
from starlette.responses import HTMLResponse

import moto_app.models as model
from moto_app.config import Settings, settings
from moto_app.contracts import AuthService, MotorcycleRepository
from moto_app.db import create_session_factory
from moto_app.enums import OperationStatus
from moto_app.interactors import (
    DeleteMotorcycleInteractor,
    GetMotorcycleInteractor,
    InsertMotorcycleInteractor,
    ListMotorcyclesInteractor,
    UpdateMotorcycleInteractor,
)
from moto_app.messages import (
    DeleteMotorcycleRequest,
    GetMotorcycleRequest,
    InsertMotorcycleRequest,
    ListMotorcyclesRequest,
    UpdateMotorcycleRequest,
)
from moto_app.repository import InMemoryMotorcycleRepository
from moto_app.security import ConfiguredAuthService
from moto_app.sql_repository import SqlMotorcycleRepository


EXPORT_COLUMNS = ["id", "make", "model", "year", "vin", "created_utc", "modified_utc"]
HTTP_STATUS_CODES = {
    OperationStatus.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    OperationStatus.NOT_AUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    OperationStatus.NOT_AUTHORIZED: status.HTTP_403_FORBIDDEN,
    OperationStatus.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    OperationStatus.CONFLICT: status.HTTP_409_CONFLICT,
    OperationStatus.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}

logging.basicConfig(level=settings.log_level.upper())
app = FastAPI(title=settings.project_name)
logger = logging.getLogger(__name__)
logger.setLevel(settings.log_level.upper())


def build_repository(config: Settings = settings) -> MotorcycleRepository:
    """
    Create the repository selected by the configuration.

    Args:
        config (Settings): Application settings.

    Returns:
        MotorcycleRepository: An in-memory or SQL-backed repository.
    """
    if config.repository == "sql":
        logger.info("Using the SQL motorcycle repository")
        return SqlMotorcycleRepository(create_session_factory(config.database_url))
    logger.info("Using the in-memory motorcycle repository")
    return InMemoryMotorcycleRepository()


_repository = build_repository()
_auth_service = ConfiguredAuthService(settings.authenticated, settings.role_map())


def get_repository() -> MotorcycleRepository:
    """
    Dependency function to get the motorcycle repository.
    """
    return _repository


def get_auth_service() -> AuthService:
    """
    Dependency function to get the auth service.
    """
    return _auth_service


def raise_for_failure(result) -> None:
    """
    Translate a failed use case response into an HTTPException.

    Args:
        result: Response message returned by an interactor.

    Raises:
        HTTPException: With the status code mapped from the response status and
                       the response's error message as detail.
    """
    if result.succeeded:
        return
    raise HTTPException(
        status_code=HTTP_STATUS_CODES[result.status], detail=result.message
    )


@app.post(
    "/motorcycles",
    response_model=model.MotorcyclePostResponse,
    status_code=status.HTTP_201_CREATED,
)
async def insert_motorcycle(
    motorcycle_request: model.MotorcyclePostRequest,
    response: Response,
    repository: MotorcycleRepository = Depends(get_repository),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Endpoint to add a motorcycle to the repository.

    Args:
        motorcycle_request (model.MotorcyclePostRequest): The motorcycle to add.
        response (Response): Outgoing response, used to set the Location header.
        repository (MotorcycleRepository): The repository, injected via dependency injection.
        auth_service (AuthService): The auth service, injected via dependency injection.

    Returns:
        model.MotorcyclePostResponse: The id assigned to the new motorcycle.
    """
    logger.info("Received motorcycle insert request")

    interactor = InsertMotorcycleInteractor(repository, auth_service)
    result = interactor.handle(InsertMotorcycleRequest(**motorcycle_request.model_dump()))
    raise_for_failure(result)

    response.headers["Location"] = f"/motorcycles/{result.id}"
    return model.MotorcyclePostResponse(
        id=result.id, message=f"Successfully created the motorcycle with ID {result.id}."
    )


@app.get("/motorcycles", response_model=model.MotorcycleListResponse)
async def list_motorcycles(
    repository: MotorcycleRepository = Depends(get_repository),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Endpoint to list every motorcycle in insertion order.

    Returns:
        model.MotorcycleListResponse: The motorcycles, possibly none.
    """
    logger.info("Received motorcycle list request")

    result = ListMotorcyclesInteractor(repository, auth_service).handle(
        ListMotorcyclesRequest()
    )
    raise_for_failure(result)

    return model.MotorcycleListResponse(
        motorcycles=[model.Motorcycle.model_validate(m) for m in result.motorcycles],
        message=f"Successfully retrieved {len(result.motorcycles)} motorcycles.",
    )


@app.get("/motorcycles/export")
async def export_motorcycles(
    repository: MotorcycleRepository = Depends(get_repository),
    auth_service: AuthService = Depends(get_auth_service),
) -> Response:
    """
    Endpoint to export every motorcycle as a parquet binary file.

    Returns:
        Response: FastAPI Response object containing the binary content of the parquet file.
    """
    logger.info("Exporting motorcycles as Parquet file")

    result = ListMotorcyclesInteractor(repository, auth_service).handle(
        ListMotorcyclesRequest()
    )
    raise_for_failure(result)

    # Create a list of dictionaries, with each dictionary representing a motorcycle.
    data = [
        {column: getattr(motorcycle, column) for column in EXPORT_COLUMNS}
        for motorcycle in result.motorcycles
    ]
    df = pd.DataFrame(data, columns=EXPORT_COLUMNS)

    # Convert DataFrame to Parquet format
    buffer = BytesIO()
    table = pa.Table.from_pandas(df, preserve_index=False)
    pq.write_table(table, buffer)

    # Prepare response with Parquet file
    response = Response(content=buffer.getvalue())
    # per https://www.rfc-editor.org/rfc/rfc2046.txt
    response.headers["Content-Type"] = "application/octet-stream"
    response.headers["Content-Disposition"] = "attachment; filename=motorcycles.parquet"
    logger.info("Export completed successfully")

    return response


@app.get("/motorcycles/{motorcycle_id}", response_model=model.MotorcycleGetResponse)
async def get_motorcycle(
    motorcycle_id: int,
    repository: MotorcycleRepository = Depends(get_repository),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Endpoint to get a single motorcycle by its id.

    Args:
        motorcycle_id (int): The id of the motorcycle.

    Returns:
        model.MotorcycleGetResponse: The motorcycle.
    """
    logger.info(f"Received motorcycle get request for ID {motorcycle_id}")

    result = GetMotorcycleInteractor(repository, auth_service).handle(
        GetMotorcycleRequest(id=motorcycle_id)
    )
    raise_for_failure(result)

    return model.MotorcycleGetResponse(
        motorcycle=model.Motorcycle.model_validate(result.motorcycle),
        message=f"Successfully retrieved the motorcycle with ID {motorcycle_id}.",
    )


@app.put("/motorcycles/{motorcycle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_motorcycle(
    motorcycle_id: int,
    motorcycle_request: model.MotorcyclePutRequest,
    repository: MotorcycleRepository = Depends(get_repository),
    auth_service: AuthService = Depends(get_auth_service),
) -> Response:
    """
    Endpoint to replace the fields of an existing motorcycle.

    Args:
        motorcycle_id (int): The id of the motorcycle to update.
        motorcycle_request (model.MotorcyclePutRequest): The new field values.

    Returns:
        Response: An empty 204 response.
    """
    logger.info(f"Received motorcycle update request for ID {motorcycle_id}")

    result = UpdateMotorcycleInteractor(repository, auth_service).handle(
        UpdateMotorcycleRequest(id=motorcycle_id, **motorcycle_request.model_dump())
    )
    raise_for_failure(result)

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.delete("/motorcycles/{motorcycle_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_motorcycle(
    motorcycle_id: int,
    repository: MotorcycleRepository = Depends(get_repository),
    auth_service: AuthService = Depends(get_auth_service),
) -> Response:
    """
    Endpoint to remove a motorcycle from the repository.

    Args:
        motorcycle_id (int): The id of the motorcycle to delete.

    Returns:
        Response: An empty 204 response.
    """
    logger.info(f"Received motorcycle delete request for ID {motorcycle_id}")

    result = DeleteMotorcycleInteractor(repository, auth_service).handle(
        DeleteMotorcycleRequest(id=motorcycle_id)
    )
    raise_for_failure(result)

    logger.info(f"Motorcycle {motorcycle_id} removed successfully")
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.get("/", response_class=HTMLResponse)
async def root():
    """
    Default endpoint that redirects the user to the Swagger UI.

    Returns:
        HTMLResponse: An HTMLResponse object that represents the Swagger UI page.
    """
    return get_swagger_ui_html(openapi_url="/openapi.json", title="API Docs")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
