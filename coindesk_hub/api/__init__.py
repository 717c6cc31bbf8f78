"""
Запросы к Coindesk API: endpoint, транспорт и разбор ответов
"""

from .client import CoindeskAPIClient
from .endpoint import ApiEndpoint, build_endpoint
from .http_client import CoindeskHttpRequest, RequestConfig
from .response import CoindeskAPIResponse

__all__ = ['CoindeskAPIClient', 'ApiEndpoint', 'build_endpoint',
           'CoindeskHttpRequest', 'RequestConfig', 'CoindeskAPIResponse']
