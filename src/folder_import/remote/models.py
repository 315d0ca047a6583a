"""Typed request and response payloads for each GraphQL operation.

Every operation the importer issues has an explicit variables model and an
explicit response model, so a change in the remote schema surfaces as a
:class:`~folder_import.remote.errors.ResponseShapeError` instead of a
``KeyError`` deep inside the resolver.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ResponseShapeError

ResponseT = TypeVar("ResponseT", bound=BaseModel)

_LANGUAGE_PATTERN = re.compile(r"^[a-z]{2}(?:[-_][a-z]{2})?$")


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class GraphQLRequest(BaseModel):
    """Body of a single GraphQL POST."""

    query: str = Field(..., min_length=1)
    operation_name: Optional[str] = Field(default=None)
    variables: Dict[str, Any] = Field(default_factory=dict)

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"query": self.query}
        if self.operation_name:
            payload["operationName"] = self.operation_name
        if self.variables:
            payload["variables"] = self.variables
        return payload


# ----------------------------------------------------------------------
# Variables
# ----------------------------------------------------------------------
class FolderSearchVariables(_Payload):
    name: str
    shape: str


class PathLookupVariables(_Payload):
    path: str


class TermSearchVariables(_Payload):
    term: str
    shape: Optional[str] = None


class TreeInput(_Payload):
    parent_id: str = Field(..., alias="parentId")


class CreateFolderInput(_Payload):
    name: str = Field(..., min_length=1)
    shape_identifier: str = Field(..., alias="shapeIdentifier", min_length=1)
    tenant_id: str = Field(..., alias="tenantId", min_length=1)
    tree: Optional[TreeInput] = None


class CreateFolderVariables(_Payload):
    input: CreateFolderInput


class PublishFolderVariables(_Payload):
    id: str
    language: str


class TypeIntrospectionVariables(_Payload):
    name: str


# ----------------------------------------------------------------------
# Responses
# ----------------------------------------------------------------------
class SearchHit(_Payload):
    id: str
    name: str = ""
    shape: Optional[str] = None
    path: Optional[str] = None


class SearchHits(_Payload):
    hits: List[SearchHit] = Field(default_factory=list)


class SearchData(_Payload):
    search: SearchHits = Field(default_factory=SearchHits)


class CreatedFolder(_Payload):
    id: str = Field(..., min_length=1)
    name: str = ""


class FolderCreate(_Payload):
    create: CreatedFolder


class CreateFolderData(_Payload):
    folder: FolderCreate


class PublishedFolder(_Payload):
    id: str


class FolderPublish(_Payload):
    publish: Optional[PublishedFolder] = None


class PublishFolderData(_Payload):
    folder: FolderPublish


class TypeRef(_Payload):
    name: Optional[str] = None
    of_type: Optional["TypeRef"] = Field(default=None, alias="ofType")

    @property
    def display_name(self) -> str:
        if self.name:
            return self.name
        if self.of_type is not None:
            return self.of_type.display_name
        return "?"


class TypeArgument(_Payload):
    name: str
    type: TypeRef


class TypeField(_Payload):
    name: str
    type: Optional[TypeRef] = None
    args: List[TypeArgument] = Field(default_factory=list)


class IntrospectedType(_Payload):
    """Object types carry ``fields``; input types carry ``input_fields`` instead."""

    name: Optional[str] = None
    fields: Optional[List[TypeField]] = None
    input_fields: Optional[List[TypeField]] = Field(default=None, alias="inputFields")


class TypeIntrospectionData(_Payload):
    introspected: Optional[IntrospectedType] = Field(default=None, alias="__type")


TypeRef.model_rebuild()


# ----------------------------------------------------------------------
# Operations
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Operation(Generic[ResponseT]):
    """A named query or mutation bound to its response model."""

    name: str
    query: str
    response_model: type[ResponseT]

    def request(self, variables: BaseModel | None = None) -> GraphQLRequest:
        payload = variables.model_dump(by_alias=True, exclude_none=True) if variables is not None else {}
        return GraphQLRequest(query=self.query, operation_name=self.name, variables=payload)

    def parse(self, data: Any) -> ResponseT:
        try:
            return self.response_model.model_validate(data)
        except ValidationError as exc:
            raise ResponseShapeError(
                f"Unexpected response shape for {self.name}: {exc.error_count()} validation error(s)",
                operation=self.name,
            ) from exc


def _language(code: str) -> str:
    if not _LANGUAGE_PATTERN.match(code):
        raise ValueError(f"Invalid language code: {code!r}")
    return code


def folder_search_operation(*, language: str, limit: int) -> Operation[SearchData]:
    query = f"""
        query DiscoverySearchFolder($name: String!, $shape: String!) {{
            search(
                language: {_language(language)}
                term: ""
                pagination: {{limit: {int(limit)}}}
                filters: {{name: {{equals: $name}}, shape: {{equals: $shape}}}}
            ) {{
                hits {{
                    id
                    name
                    shape
                    path
                }}
            }}
        }}
    """
    return Operation("DiscoverySearchFolder", query, SearchData)


def path_lookup_operation() -> Operation[SearchData]:
    query = """
        query FindFolderByPath($path: String!) {
            search(
                path: $path
                options: {}
                pagination: {limit: 1}
            ) {
                hits {
                    id
                    name
                    shape
                    path
                }
            }
        }
    """
    return Operation("FindFolderByPath", query, SearchData)


def term_search_operation(*, language: str, limit: int) -> Operation[SearchData]:
    query = f"""
        query SearchFolders($term: String!, $shape: String) {{
            search(
                language: {_language(language)}
                term: $term
                pagination: {{limit: {int(limit)}}}
                filters: {{shape: {{equals: $shape}}}}
            ) {{
                hits {{
                    id
                    name
                    shape
                    path
                }}
            }}
        }}
    """
    return Operation("SearchFolders", query, SearchData)


def create_folder_operation(*, language: str, disable_component_validation: bool) -> Operation[CreateFolderData]:
    flag = "true" if disable_component_validation else "false"
    query = f"""
        mutation CreateFolder($input: CreateFolderInput!) {{
            folder {{
                create(
                    disableComponentValidation: {flag}
                    input: $input
                    language: "{_language(language)}"
                ) {{
                    id
                    name
                }}
            }}
        }}
    """
    return Operation("CreateFolder", query, CreateFolderData)


def publish_folder_operation() -> Operation[PublishFolderData]:
    query = """
        mutation PublishFolder($id: ID!, $language: String!) {
            folder {
                publish(id: $id, language: $language) {
                    id
                }
            }
        }
    """
    return Operation("PublishFolder", query, PublishFolderData)


def type_introspection_operation() -> Operation[TypeIntrospectionData]:
    query = """
        query IntrospectType($name: String!) {
            __type(name: $name) {
                name
                fields {
                    name
                    type {
                        name
                        ofType {
                            name
                        }
                    }
                    args {
                        name
                        type {
                            name
                            ofType {
                                name
                            }
                        }
                    }
                }
                inputFields {
                    name
                    type {
                        name
                        ofType {
                            name
                        }
                    }
                }
            }
        }
    """
    return Operation("IntrospectType", query, TypeIntrospectionData)


__all__ = [
    "CreateFolderData",
    "CreateFolderInput",
    "CreateFolderVariables",
    "CreatedFolder",
    "FolderSearchVariables",
    "GraphQLRequest",
    "IntrospectedType",
    "Operation",
    "PathLookupVariables",
    "PublishFolderData",
    "PublishFolderVariables",
    "SearchData",
    "SearchHit",
    "TermSearchVariables",
    "TreeInput",
    "TypeArgument",
    "TypeField",
    "TypeIntrospectionData",
    "TypeIntrospectionVariables",
    "TypeRef",
    "create_folder_operation",
    "folder_search_operation",
    "path_lookup_operation",
    "publish_folder_operation",
    "term_search_operation",
    "type_introspection_operation",
]
