"""模型基类 -- 线上字段使用 camelCase，Python 属性使用 snake_case"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """camelCase 别名基类

    客户端事件与 HTTP 响应使用 camelCase（listId、dueDate），
    输入时同时接受 camelCase 与 snake_case。
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )
