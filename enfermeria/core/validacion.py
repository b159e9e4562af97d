from typing import List, Iterable, Dict, Any

ORIGENES_REQUEST = ("body", "query", "path", "header")


def _campo(loc: Iterable[Any]) -> str:
    partes = [str(p) for p in loc]
    if partes and partes[0] in ORIGENES_REQUEST:
        partes = partes[1:]
    return ".".join(partes) or "documento"


def _mensaje(error: Dict[str, Any]) -> str:
    tipo = error.get("type", "")
    ctx = error.get("ctx") or {}

    if tipo == "missing":
        return "es obligatorio"
    if tipo == "string_too_short":
        return "no puede estar vacío" if ctx.get("min_length") == 1 else f"debe tener al menos {ctx.get('min_length')} caracteres"
    if tipo == "string_too_long":
        return f"no puede superar {ctx.get('max_length')} caracteres"
    if tipo == "greater_than_equal":
        return f"debe ser mayor o igual a {ctx.get('ge')}"
    if tipo == "enum":
        return f"debe ser uno de: {ctx.get('expected')}"
    if tipo in ("float_parsing", "float_type"):
        return "debe ser un número"
    if tipo in ("bool_parsing", "bool_type"):
        return "debe ser verdadero o falso"
    if tipo.startswith("datetime"):
        return "debe ser una fecha y hora válida (ISO 8601)"
    return error.get("msg", "valor no válido")


def mensajes_de_error(errores: List[Dict[str, Any]]) -> List[str]:
    """
    Convierte los errores de pydantic (`exc.errors()`) en mensajes
    'campo: mensaje', uno por campo.
    """
    mensajes = []
    vistos = set()
    for error in errores:
        campo = _campo(error.get("loc", ()))
        if campo in vistos:
            continue
        vistos.add(campo)
        mensajes.append(f"{campo}: {_mensaje(error)}")
    return mensajes
