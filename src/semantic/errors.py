class CheckerError(Exception):
    """Error de uso del checker (no es un diagnóstico del programa analizado)."""


class ConfigError(CheckerError):
    def __init__(self, msg, key=None):
        where = f" (clave '{key}')" if key is not None else ""
        super().__init__(msg + where)
        self.key = key
