from shared.middleware.error_handler import ExceptionFilter, install_exception_filter

__all__ = ["ExceptionFilter", "install_exception_filter"]
