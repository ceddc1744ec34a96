"""Reading resource import lists from a parsed imports CFG file."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Union

from latren.cfgfields import CFGField, CFGFieldType, CFGObject
from latren.cfgvalidate import CFGFileTemplate
from latren.paths import ResourcePath

logger = logging.getLogger(__name__)

_REQ = CFGFieldType.STRUCT_MEMBER_REQUIRED
_STR = CFGFieldType.STRING
_INT = CFGFieldType.INTEGER
_STRUCT = CFGFieldType.STRUCT

AdditionalValue = Union[str, int, float]


class ResourceType(Enum):
    MATERIAL = auto()
    OBJECT = auto()
    BLUEPRINT = auto()
    TEXTURE = auto()
    SHADER = auto()
    FONT = auto()
    MODEL = auto()
    AUDIO = auto()
    STAGE = auto()
    TEXT = auto()
    BINARY = auto()
    JSON = auto()
    CFG = auto()


@dataclass
class Import:
    """One resource to import: its id, its path and any extra values."""

    id: str = ""
    path: str = ""
    additional_data: list[AdditionalValue] = field(default_factory=list)


@dataclass
class ShaderImport:
    """A shader program built from vertex, fragment and geometry sources."""

    id: str = ""
    vertex_path: str = ""
    fragment_path: str = ""
    geometry_path: str = ""


@dataclass
class Imports:
    """All imports of one resource type from one import list."""

    resource_type: ResourceType
    parent_path: ResourcePath = field(default_factory=ResourcePath)
    imports: list[Any] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.imports)

    def __iter__(self):
        return iter(self.imports)


_ANNOTATED_TYPES: dict[str, ResourceType] = {
    "[Texture]": ResourceType.TEXTURE,
    "[Model]": ResourceType.MODEL,
    "[Font]": ResourceType.FONT,
    "[Stage]": ResourceType.STAGE,
    "[Shader]": ResourceType.SHADER,
    "[Audio]": ResourceType.AUDIO,
    "[Text]": ResourceType.TEXT,
    "[Binary]": ResourceType.BINARY,
    "[JSON]": ResourceType.JSON,
    "[CFG]": ResourceType.CFG,
}

LOAD_ORDER: tuple[ResourceType, ...] = (
    ResourceType.TEXTURE,
    ResourceType.SHADER,
    ResourceType.MODEL,
    ResourceType.FONT,
    ResourceType.AUDIO,
    ResourceType.TEXT,
    ResourceType.BINARY,
    ResourceType.JSON,
    ResourceType.CFG,
    ResourceType.STAGE,
)


def imports_template() -> CFGFileTemplate:
    """Return the template declaring the custom types of an imports file."""
    single_path = (_STRUCT, _REQ, _STR)
    return CFGFileTemplate(
        types={
            "Font": (_STRUCT, _REQ, _STR, _INT),
            "Model": single_path,
            "Shader": (_STRUCT, _REQ, _STR, _REQ, _STR, _STR, _STR),
            "Stage": single_path,
            "Texture": single_path,
            "Audio": single_path,
            "Text": single_path,
            "Binary": single_path,
            "JSON": single_path,
            "CFG": single_path,
        }
    )


def _new_imports(obj: CFGObject | None, resource_type: ResourceType) -> Imports:
    imports = Imports(resource_type)
    if obj is not None and obj.name is not None:
        imports.parent_path = ResourcePath(f"${{res}}/{obj.name}")
    return imports


def _all_structs(obj: CFGObject, what: str) -> bool:
    if all(item.type is CFGFieldType.STRUCT for item in obj.items):
        return True
    logger.warning("'%s' cannot be parsed as a list of %s!", obj.name or "", what)
    return False


def _string_item(struct: CFGField, index: int) -> str | None:
    if not isinstance(struct, CFGObject):
        return None
    item = struct.item(index)
    if item is None or item.type is not CFGFieldType.STRING:
        return None
    return item.value


def _additional_value(item: CFGField) -> AdditionalValue | None:
    t = item.type
    if t is CFGFieldType.STRING:
        return item.value
    if t is CFGFieldType.INTEGER:
        return int(item.value)
    if t is CFGFieldType.FLOAT:
        return float(item.value)
    if t is CFGFieldType.NUMBER:
        return item.value if isinstance(item.value, int) else float(item.value)
    return None


def list_imports(obj: CFGObject | None, resource_type: ResourceType) -> Imports:
    """Collect the imports of one import list.

    Every item must be a struct whose first member is the path; any further
    members that were written in the file become additional data.
    """
    imports = _new_imports(obj, resource_type)
    if obj is None or not _all_structs(obj, "imports"):
        return imports
    for struct in obj.items:
        path = _string_item(struct, 0)
        if path is None:
            continue
        entry = Import(id=struct.name or "", path=path)
        for extra in struct.items[1:]:
            if extra.automatically_created:
                continue
            value = _additional_value(extra)
            if value is not None:
                entry.additional_data.append(value)
        imports.imports.append(entry)
    return imports


def list_shader_imports(obj: CFGObject | None) -> Imports:
    """Collect shader imports, each needing vertex, fragment and geometry paths."""
    imports = _new_imports(obj, ResourceType.SHADER)
    if obj is None or not _all_structs(obj, "shader imports"):
        return imports
    for struct in obj.items:
        paths = [_string_item(struct, i) for i in range(3)]
        if any(p is None for p in paths):
            continue
        vertex, fragment, geometry = paths
        imports.imports.append(
            ShaderImport(
                id=struct.name or "",
                vertex_path=vertex,
                fragment_path=fragment,
                geometry_path=geometry,
            )
        )
    return imports


def index_imports(root: CFGObject) -> dict[ResourceType, list[Imports]]:
    """Find the annotated import lists of a root object.

    The result is ordered by the order resources are loaded in; types with
    no import list are left out.
    """
    found: dict[ResourceType, list[CFGObject]] = {}
    for item in root.items:
        if item.type is not CFGFieldType.ARRAY or not isinstance(item, CFGObject):
            continue
        resource_type = _ANNOTATED_TYPES.get(item.type_annotation)
        if resource_type is None:
            continue
        found.setdefault(resource_type, []).append(item)

    total = sum(len(lst) for lists in found.values() for lst in lists)
    logger.info("Indexed %d imports", total)

    result: dict[ResourceType, list[Imports]] = {}
    for resource_type in LOAD_ORDER:
        lists = found.get(resource_type)
        if not lists:
            continue
        if resource_type is ResourceType.SHADER:
            result[resource_type] = [list_shader_imports(lst) for lst in lists]
        else:
            result[resource_type] = [list_imports(lst, resource_type) for lst in lists]
    return result