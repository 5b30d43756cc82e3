"""Conversion of Flow type annotations into serializable type descriptors."""

from typing import Any, Dict, List, Optional

from propdoc.parser.nodes import (
    ArrayTypeAnnotation,
    ExistsTypeAnnotation,
    FunctionTypeAnnotation,
    GenericTypeAnnotation,
    IntersectionTypeAnnotation,
    LiteralTypeAnnotation,
    NullableTypeAnnotation,
    ObjectTypeAnnotation,
    ObjectTypeIndexer,
    ObjectTypeProperty,
    PrimitiveTypeAnnotation,
    TupleTypeAnnotation,
    TypeAnnotation,
    TypeofTypeAnnotation,
    UnionTypeAnnotation,
)

PRIMITIVE_NAMES = {
    "bool": "boolean",
}


def get_flow_type(node: Optional[TypeAnnotation]) -> Dict[str, Any]:
    """Describe a type annotation the way react-docgen reports ``flowType``."""
    if node is None:
        return {"name": "unknown"}

    if isinstance(node, NullableTypeAnnotation):
        result = get_flow_type(node.type_annotation)
        result["nullable"] = True
        return result

    if isinstance(node, PrimitiveTypeAnnotation):
        return {"name": PRIMITIVE_NAMES.get(node.name, node.name)}

    if isinstance(node, LiteralTypeAnnotation):
        return {"name": "literal", "value": node.raw}

    if isinstance(node, GenericTypeAnnotation):
        if not node.type_parameters:
            return {"name": node.name}
        return {
            "name": node.name,
            "raw": node.raw,
            "elements": [get_flow_type(param) for param in node.type_parameters]
        }

    if isinstance(node, ArrayTypeAnnotation):
        return {
            "name": "Array",
            "raw": node.raw,
            "elements": [get_flow_type(node.element_type)]
        }

    if isinstance(node, ObjectTypeAnnotation):
        return _object_signature(node)

    if isinstance(node, FunctionTypeAnnotation):
        return _function_signature(node)

    if isinstance(node, UnionTypeAnnotation):
        return {"name": "union", "raw": node.raw, "elements": _elements(node.types)}

    if isinstance(node, IntersectionTypeAnnotation):
        return {"name": "intersection", "raw": node.raw, "elements": _elements(node.types)}

    if isinstance(node, TupleTypeAnnotation):
        return {"name": "tuple", "raw": node.raw, "elements": _elements(node.types)}

    if isinstance(node, TypeofTypeAnnotation):
        return {"name": "typeof", "raw": node.raw}

    if isinstance(node, ExistsTypeAnnotation):
        return {"name": "*"}

    return {"name": "unknown", "raw": node.raw}


def _elements(types: List[TypeAnnotation]) -> List[Dict[str, Any]]:
    return [get_flow_type(member) for member in types]


def _object_signature(node: ObjectTypeAnnotation) -> Dict[str, Any]:
    properties = []
    for member in node.properties:
        if isinstance(member, ObjectTypeProperty):
            value = get_flow_type(member.value)
            value["required"] = not member.optional
            properties.append({"key": member.key, "value": value})
        elif isinstance(member, ObjectTypeIndexer):
            value = get_flow_type(member.value)
            value["required"] = True
            properties.append({"key": get_flow_type(member.key), "value": value})

    return {
        "name": "signature",
        "type": "object",
        "raw": node.raw,
        "signature": {"properties": properties}
    }


def _function_signature(node: FunctionTypeAnnotation) -> Dict[str, Any]:
    arguments = []
    for index, param in enumerate(node.params):
        arguments.append({
            "name": param.name or f"arg{index}",
            "type": get_flow_type(param.type_annotation)
        })
    if node.rest is not None:
        arguments.append({
            "name": node.rest.name or "rest",
            "type": get_flow_type(node.rest.type_annotation),
            "rest": True
        })

    return {
        "name": "signature",
        "type": "function",
        "raw": node.raw,
        "signature": {
            "arguments": arguments,
            "return": get_flow_type(node.return_type)
        }
    }
