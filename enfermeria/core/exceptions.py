from typing import List


class ErrorValidacion(ValueError):
    """Uno o más campos no cumplen sus restricciones. Un mensaje por campo."""

    def __init__(self, errores: List[str], message: str = "Datos no válidos"):
        self.errores = errores
        self.message = message
        super().__init__(f"{message}: {'; '.join(errores)}")


class IdentificadorInvalido(ValueError):
    def __init__(self, identificador: str):
        self.identificador = identificador
        super().__init__(f"Identificador inválido: {identificador}")
