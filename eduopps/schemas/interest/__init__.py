from .requests import InterestCreate
from .responses import StudentInterestResponse

__all__ = ["InterestCreate", "StudentInterestResponse"]
