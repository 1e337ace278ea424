"""
Renderer interface
"""
from abc import ABC, abstractmethod
from typing import Union

from .documents import ReportDocument


class ReportRenderer(ABC):
    """Turns a ReportDocument into a finished artifact"""

    media_type = 'application/octet-stream'
    extension = ''

    @abstractmethod
    def render(self, document: ReportDocument) -> Union[bytes, str]:
        raise NotImplementedError
