"""Base CRUD controller.

A ``CRUDController`` exposes a ``CRUDService`` as a REST resource:

    POST   ""       create an entity (201, 409)
    GET    ""       list entities with 0-based pagination (200)
    GET    "/{id}"  get an entity (200, 404)
    PUT    "/{id}"  update an entity (200, 404, 409)
    DELETE "/{id}"  delete an entity (204, 404)

Usage:
    controller = CRUDController(
        type_name="Foo",
        service_dependency=get_foo_service,
        mapper=FooMapper(),
        id_type=UUID,
        dto_type=FooDTO,
        create_dto_type=CreateFooDTO,
        update_dto_type=UpdateFooDTO,
        prefix="/foos",
    )
    app.include_router(controller.router)
"""

from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from fastapi import APIRouter, Body, Depends, Path, Query, Request, Response, status

from restcrud.api.dependencies import get_parameters
from restcrud.application.mappers import CRUDDTOMapper
from restcrud.application.services.base import CRUDService
from restcrud.core.config import Settings, get_settings
from restcrud.core.exceptions import CRUDError, CRUDErrorException
from restcrud.core.paged import Paged
from restcrud.core.parameters import Parameters
from restcrud.infrastructure.logging import get_logger

I = TypeVar("I")
M = TypeVar("M")
D = TypeVar("D")
CM = TypeVar("CM")
UM = TypeVar("UM")
CD = TypeVar("CD")
UD = TypeVar("UD")

NOT_FOUND_RESPONSE = "Entity is not found."
CONFLICT_RESPONSE = "Entity with given data already exists."

PAGE_DESCRIPTION = "Number of the 0-based page of entities to request"
PER_PAGE_DESCRIPTION = "Number of entities to request per page"

CREATE_SUMMARY = "Create a new entity"
CREATE_DESCRIPTION = "Creates a new entity with given data and returns created entity."
CREATE_DTO_DESCRIPTION = "Create DTO containing data of the entity to create"
CREATE_RESPONSE = "Entity is created successfully."

LIST_SUMMARY = "List entities"
LIST_DESCRIPTION = "List entities with given pagination."
LIST_RESPONSE = "Entities are returned successfully."

GET_SUMMARY = "Get entity with given id"
GET_DESCRIPTION = "Gets entity with given id."
GET_ID_DESCRIPTION = "Id of the entity to request"
GET_RESPONSE = "Entity is returned successfully."

UPDATE_SUMMARY = "Update entity with given id"
UPDATE_DESCRIPTION = "Updates entity with given id with given data and returns updated entity."
UPDATE_ID_DESCRIPTION = "Id of the entity to update"
UPDATE_DTO_DESCRIPTION = "Update DTO containing data of the entity to update"
UPDATE_RESPONSE = "Entity is updated successfully."

DELETE_SUMMARY = "Delete entity with given id"
DELETE_DESCRIPTION = "Deletes entity with given id."
DELETE_ID_DESCRIPTION = "Id of the entity to delete"
DELETE_RESPONSE = "Entity is deleted successfully."

_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": CRUDError, "description": NOT_FOUND_RESPONSE}}
_CONFLICT = {status.HTTP_409_CONFLICT: {"model": CRUDError, "description": CONFLICT_RESPONSE}}


def create_link_header(request: Request, page: int, total_pages: int, per_page: int) -> str:
    """Create Link header for a 0-based page"""
    base_url = str(request.url).split("?")[0]
    last_page = max(total_pages - 1, 0)
    links = [
        f'<{base_url}?page=0&per_page={per_page}>; rel="first"',
        f'<{base_url}?page={last_page}&per_page={per_page}>; rel="last"',
    ]

    if page > 0:
        links.append(f'<{base_url}?page={page - 1}&per_page={per_page}>; rel="prev"')

    if page < last_page:
        links.append(f'<{base_url}?page={page + 1}&per_page={per_page}>; rel="next"')

    return ", ".join(links)


class CRUDController(Generic[I, M, D, CM, UM, CD, UD]):
    """Exposes a CRUD service as REST endpoints on a FastAPI router.

    Attributes:
        type_name: Name of the managed type, used in error messages and logs
        service_dependency: FastAPI dependency returning the CRUD service of a request
        mapper: Converts between models and DTOs
        router: Router holding the CRUD endpoints
    """

    def __init__(
        self,
        type_name: str,
        service_dependency: Callable[..., CRUDService],
        mapper: CRUDDTOMapper[I, M, D, CM, UM, CD, UD],
        *,
        id_type: Type[I],
        dto_type: Type[D],
        create_dto_type: Type[CD],
        update_dto_type: Type[UD],
        prefix: str,
        tags: Optional[List[str]] = None,
        settings: Optional[Settings] = None,
    ):
        self.type_name = type_name
        self.service_dependency = service_dependency
        self.mapper = mapper
        self.id_type = id_type
        self.dto_type = dto_type
        self.create_dto_type = create_dto_type
        self.update_dto_type = update_dto_type
        self.settings = settings or get_settings()
        self.log = get_logger(f"{__name__}.{type_name}")
        self.router = APIRouter(prefix=prefix, tags=tags or [type_name])
        self._register_routes()

    async def create(self, create_dto: Any, service: CRUDService, parameters: Parameters) -> Any:
        self.log.debug("crud_create_request", parameters=parameters, dto=create_dto)
        create_model = self.mapper.create_dto_to_create_model(create_dto, parameters)
        model = await service.create(create_model, parameters)
        return self.mapper.model_to_dto(model, parameters)

    async def list(
        self, page: int, per_page: int, service: CRUDService, parameters: Parameters
    ) -> Paged:
        self.log.debug("crud_list_request", page=page, per_page=per_page, parameters=parameters)
        paged_models = await service.list(page, per_page, parameters)
        return paged_models.map(lambda model: self.mapper.model_to_dto(model, parameters))

    async def get(self, id: Any, service: CRUDService, parameters: Parameters) -> Any:
        self.log.debug("crud_get_request", id=str(id), parameters=parameters)
        model = await service.get(id, parameters)
        if model is None:
            raise CRUDErrorException.not_found(self.type_name, id)
        return self.mapper.model_to_dto(model, parameters)

    async def update(
        self, id: Any, update_dto: Any, service: CRUDService, parameters: Parameters
    ) -> Any:
        self.log.debug("crud_update_request", id=str(id), parameters=parameters, dto=update_dto)
        update_model = self.mapper.update_dto_to_update_model(update_dto, parameters)
        model = await service.update(id, update_model, parameters)
        return self.mapper.model_to_dto(model, parameters)

    async def delete(self, id: Any, service: CRUDService, parameters: Parameters) -> None:
        self.log.debug("crud_delete_request", id=str(id), parameters=parameters)
        await service.delete(id, parameters)

    def _register_routes(self) -> None:
        # Endpoint signatures are built here so FastAPI sees the concrete types
        controller = self
        id_type = self.id_type
        dto_type = self.dto_type
        create_dto_type = self.create_dto_type
        update_dto_type = self.update_dto_type
        get_service = self.service_dependency

        @self.router.post(
            "",
            response_model=dto_type,
            status_code=status.HTTP_201_CREATED,
            summary=CREATE_SUMMARY,
            description=CREATE_DESCRIPTION,
            responses={status.HTTP_201_CREATED: {"description": CREATE_RESPONSE}, **_CONFLICT},
        )
        async def create(
            create_dto: create_dto_type = Body(..., description=CREATE_DTO_DESCRIPTION),
            service: CRUDService = Depends(get_service),
            parameters: Parameters = Depends(get_parameters),
        ):
            return await controller.create(create_dto, service, parameters)

        @self.router.get(
            "",
            response_model=Paged[dto_type],
            summary=LIST_SUMMARY,
            description=LIST_DESCRIPTION,
            responses={status.HTTP_200_OK: {"description": LIST_RESPONSE}},
        )
        async def list_entities(
            request: Request,
            response: Response,
            page: int = Query(0, ge=0, description=PAGE_DESCRIPTION),
            per_page: int = Query(
                controller.settings.default_per_page,
                ge=1,
                le=controller.settings.max_per_page,
                description=PER_PAGE_DESCRIPTION,
            ),
            service: CRUDService = Depends(get_service),
            parameters: Parameters = Depends(get_parameters),
        ):
            paged = await controller.list(page, per_page, service, parameters)
            response.headers["X-Total-Pages"] = str(paged.total_pages)
            response.headers["Link"] = create_link_header(
                request, page, paged.total_pages, per_page
            )
            return paged

        @self.router.get(
            "/{id}",
            response_model=dto_type,
            summary=GET_SUMMARY,
            description=GET_DESCRIPTION,
            responses={status.HTTP_200_OK: {"description": GET_RESPONSE}, **_NOT_FOUND},
        )
        async def get(
            id: id_type = Path(..., description=GET_ID_DESCRIPTION),
            service: CRUDService = Depends(get_service),
            parameters: Parameters = Depends(get_parameters),
        ):
            return await controller.get(id, service, parameters)

        @self.router.put(
            "/{id}",
            response_model=dto_type,
            summary=UPDATE_SUMMARY,
            description=UPDATE_DESCRIPTION,
            responses={
                status.HTTP_200_OK: {"description": UPDATE_RESPONSE},
                **_NOT_FOUND,
                **_CONFLICT,
            },
        )
        async def update(
            id: id_type = Path(..., description=UPDATE_ID_DESCRIPTION),
            update_dto: update_dto_type = Body(..., description=UPDATE_DTO_DESCRIPTION),
            service: CRUDService = Depends(get_service),
            parameters: Parameters = Depends(get_parameters),
        ):
            return await controller.update(id, update_dto, service, parameters)

        @self.router.delete(
            "/{id}",
            status_code=status.HTTP_204_NO_CONTENT,
            response_class=Response,
            summary=DELETE_SUMMARY,
            description=DELETE_DESCRIPTION,
            responses={status.HTTP_204_NO_CONTENT: {"description": DELETE_RESPONSE}, **_NOT_FOUND},
        )
        async def delete(
            id: id_type = Path(..., description=DELETE_ID_DESCRIPTION),
            service: CRUDService = Depends(get_service),
            parameters: Parameters = Depends(get_parameters),
        ):
            await controller.delete(id, service, parameters)
            return Response(status_code=status.HTTP_204_NO_CONTENT)
