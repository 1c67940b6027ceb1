"""TaskSync Core -- 事件日志 + 投影引擎 + 查询层"""
