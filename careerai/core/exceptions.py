"""业务异常定义"""


class CareerAIError(Exception):
    """业务异常基类"""
    pass


class NotFoundError(CareerAIError):
    """资源不存在或无权访问"""
    pass


class PermissionDeniedError(CareerAIError):
    """无权执行该操作"""
    pass


class ConflictError(CareerAIError):
    """重复操作(如重复投递)"""
    pass


class ValidationError(CareerAIError):
    """请求数据不合法"""
    pass


class SlotExpiredError(CareerAIError):
    """面试时段或笔试已过期"""
    pass
