import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# ------------------------------------------------------------------
# 数据持久化：文件读写
# ------------------------------------------------------------------
# 文件不存在时返回的“空列表”标记，前端按 JSON 空数组解析
EMPTY_RECORDS = "[]"


class RecordsError(Exception):
    """读写记录文件失败，str() 即为可直接展示的错误信息。"""

    def __init__(self, path: str, message: str):
        super().__init__(message)
        self.path = path
        self.message = message

    def __str__(self):
        return self.message


class RecordsNotFoundError(RecordsError):
    pass


class RecordsPermissionError(RecordsError):
    pass


class RecordsEncodingError(RecordsError):
    pass


class RecordsIOError(RecordsError):
    pass


@dataclass
class SaveRequest:
    path: str
    data: str

    def __post_init__(self):
        for key in ("path", "data"):
            if not isinstance(getattr(self, key), str):
                raise TypeError(f"invalid args `req`: field `{key}` must be a string")

    @classmethod
    def from_dict(cls, raw) -> "SaveRequest":
        if not isinstance(raw, dict):
            raise TypeError("invalid args `req`: expected an object with `path` and `data`")
        for key in ("path", "data"):
            if key not in raw:
                raise TypeError(f"invalid args `req`: missing field `{key}`")
        return cls(path=raw["path"], data=raw["data"])


def _os_message(e: OSError) -> str:
    # OSError 的 str() 会带上 [Errno n] 前缀和文件名，这里只保留系统描述
    if e.strerror:
        return e.strerror
    return str(e)


def _wrap_os_error(path: str, e: OSError) -> RecordsError:
    message = _os_message(e)
    if isinstance(e, FileNotFoundError):
        return RecordsNotFoundError(path, message)
    if isinstance(e, PermissionError):
        return RecordsPermissionError(path, message)
    return RecordsIOError(path, message)


def write_records(path: str, data: str) -> None:
    # 覆盖写入（不存在则创建），不创建父目录，也不保证原子性
    # 先编码再打开文件，编码失败时不会把原文件截断为空
    try:
        payload = data.encode("utf-8")
    except UnicodeEncodeError as e:
        err = RecordsEncodingError(path, f"data is not valid UTF-8 text: {e.reason}")
        logger.error(f"保存记录失败: {path}: {err}")
        raise err from e
    try:
        with open(path, "wb") as f:
            f.write(payload)
    except ValueError as e:
        # 路径中含有 NUL 等无法交给系统的字符
        err = RecordsIOError(path, str(e))
        logger.error(f"保存记录失败: {path!r}: {err}")
        raise err from e
    except OSError as e:
        err = _wrap_os_error(path, e)
        logger.error(f"保存记录失败: {path}: {err}")
        raise err from e
    logger.debug(f"记录已保存到 {path}，共 {len(data)} 个字符")


def read_records(path: str) -> str:
    # 直接读取，用“文件不存在”异常触发空列表回退，避免先检查后读取的竞态
    try:
        with open(path, "r", encoding="utf-8", newline="") as f:
            data = f.read()
    except (FileNotFoundError, NotADirectoryError):
        # 路径中间某一段是普通文件时同样视为文件不存在
        logger.info(f"记录文件不存在，返回空列表: {path}")
        return EMPTY_RECORDS
    except UnicodeDecodeError as e:
        err = RecordsEncodingError(path, f"stream did not contain valid UTF-8: {e.reason}")
        logger.error(f"读取记录失败: {path}: {err}")
        raise err from e
    except ValueError:
        # 路径中含有 NUL，系统上不可能存在这样的文件
        logger.info(f"记录文件不存在，返回空列表: {path!r}")
        return EMPTY_RECORDS
    except OSError as e:
        err = _wrap_os_error(path, e)
        logger.error(f"读取记录失败: {path}: {err}")
        raise err from e
    logger.debug(f"已读取记录文件 {path}，共 {len(data)} 个字符")
    return data
