import logging

from models import RecordsError, SaveRequest, read_records, write_records

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# 前端可调用的命令：统一返回 (结果, 错误信息)
# ------------------------------------------------------------------


def save_records(req) -> tuple[None, str | None]:
    if not isinstance(req, SaveRequest):
        try:
            req = SaveRequest.from_dict(req)
        except TypeError as e:
            return None, str(e)
    try:
        write_records(req.path, req.data)
    except RecordsError as e:
        return None, str(e)
    logger.info(f"记录已保存: {req.path}")
    return None, None


def load_records(path) -> tuple[str | None, str | None]:
    if not isinstance(path, str):
        return None, "invalid args `path`: expected a string"
    try:
        data = read_records(path)
    except RecordsError as e:
        return None, str(e)
    logger.info(f"记录已加载: {path}")
    return data, None


COMMANDS = {
    "save_records": save_records,
    "load_records": load_records,
}


def invoke(name: str, args: dict | None = None):
    """按名称调用命令，参数格式与前端一致，例如
    invoke("load_records", {"path": "records.json"})。

    任何失败都以 (None, 错误信息) 返回，不会抛出异常。
    """
    handler = COMMANDS.get(name)
    if handler is None:
        logger.warning(f"未知命令: {name}")
        return None, f"command {name} not found"
    if args is None:
        args = {}
    if not isinstance(args, dict):
        return None, f"invalid args for command {name}: expected an object"
    try:
        return handler(**args)
    except TypeError as e:
        # 参数缺失或多余
        logger.warning(f"命令 {name} 参数错误: {e}")
        return None, f"invalid args for command {name}: {e}"
