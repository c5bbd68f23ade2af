from .request_logging import RequestLogging

__all__ = [
	"RequestLogging",
]
