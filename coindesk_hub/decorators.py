import functools
import logging
from typing import Any, Callable, Dict

def log_action(verbose: bool = False):
    """
    Декоратор для логирования операций клиента
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> Any:
            logger = logging.getLogger('coindesk_hub.actions')

            log_data = {
                'action': func.__name__.upper(),
                'args': args,
                'kwargs': kwargs
            }

            try:
                result = func(*args, **kwargs)
                log_data['result'] = 'OK'

                if verbose:
                    log_data['details'] = _describe_result(result)

                logger.info(_format_log_message(log_data))
                return result

            except Exception as e:
                log_data['result'] = 'ERROR'
                log_data['error_type'] = type(e).__name__
                log_data['error_message'] = str(e)

                logger.error(_format_log_message(log_data))
                raise

        return wrapper
    return decorator

def _describe_result(result: Any) -> str:
    if isinstance(result, (list, tuple, dict)):
        return f"{type(result).__name__}[{len(result)}]"
    return type(result).__name__

def _format_log_message(log_data: Dict[str, Any]) -> str:
    """Форматирует сообщение лога"""
    parts = [log_data['action']]

    # Первый аргумент метода клиента - сам клиент
    if log_data['args']:
        client = log_data['args'][0]
        url = getattr(client, 'url', None)
        if url is not None:
            parts.append(f"url='{url}'")

    parts.append(f"result={log_data['result']}")

    if 'details' in log_data:
        parts.append(f"details={log_data['details']}")

    if log_data['result'] == 'ERROR':
        parts.append(f"error={log_data['error_type']}:{log_data['error_message']}")

    return ' '.join(parts)
