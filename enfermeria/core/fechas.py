from datetime import datetime, date, time
from typing import Optional, Any

FORMATOS_FECHA = ("%d/%m/%Y", "%Y-%m-%d", "%d-%m-%Y")
FORMATOS_HORA = ("%H:%M", "%H:%M:%S", "%I:%M %p")


def parse_fecha(value: Any) -> date:
    """
    Convierte la fecha recibida en la API a `date`.
    Acepta `date`, `datetime` o texto en DD/MM/YYYY, YYYY-MM-DD o DD-MM-YYYY.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        texto = value.strip()
        for formato in FORMATOS_FECHA:
            try:
                return datetime.strptime(texto, formato).date()
            except ValueError:
                continue
        try:
            return datetime.fromisoformat(texto).date()
        except ValueError:
            pass
    raise ValueError(f"Fecha no reconocida: {value!r} (use DD/MM/YYYY)")


def parse_hora(value: Any) -> time:
    if isinstance(value, datetime):
        return value.time().replace(microsecond=0)
    if isinstance(value, time):
        return value
    if isinstance(value, str):
        texto = value.strip().upper()
        for formato in FORMATOS_HORA:
            try:
                return datetime.strptime(texto, formato).time()
            except ValueError:
                continue
    raise ValueError(f"Hora no reconocida: {value!r} (use HH:MM)")


def combinar_fecha_hora(fecha: Any, hora: Any = None) -> datetime:
    dia = parse_fecha(fecha)
    momento = parse_hora(hora) if hora not in (None, "") else time(0, 0)
    return datetime.combine(dia, momento)


def formatear_fecha(valor: Optional[datetime]) -> str:
    return valor.strftime("%d/%m/%Y") if valor else ""


def formatear_hora(valor: Optional[datetime]) -> str:
    return valor.strftime("%H:%M") if valor else ""


def fecha_visita_legacy(doc: dict) -> Optional[datetime]:
    """
    Documentos antiguos guardaban `fecha` y `hora` como texto libre.
    Devuelve None si no se pueden interpretar.
    """
    if not doc.get("fecha"):
        return None
    try:
        return combinar_fecha_hora(doc.get("fecha"), doc.get("hora"))
    except ValueError:
        return None
