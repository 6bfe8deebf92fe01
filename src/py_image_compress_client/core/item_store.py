"""输入项存储模块。

按加入顺序保存待压缩的图片，并在加入时过滤不支持的类型。
"""

from collections.abc import Iterable, Iterator
from pathlib import Path

from ..exceptions import NotFoundError, SourceReadError, UnsupportedMediaTypeError
from ..models.constants import ImageFormats
from ..models.input_item import InputItem, ItemSource
from ..utils.file_helpers import detect_image_format
from ..utils.logging_helpers import get_logger
from ..utils.message_formatter import MessageFormatter


logger = get_logger()

SourceLike = ItemSource | str | Path


class ItemStore:
    """有序的输入项集合

    只保存内存数据，没有网络或计时副作用。
    """

    def __init__(self) -> None:
        self._items: dict[str, InputItem] = {}

    def add(self, sources: Iterable[SourceLike], strict: bool = False) -> list[InputItem]:
        """加入一组图片来源

        不支持的类型默认静默丢弃；strict 模式下抛出异常，且本次调用不保存任何项。

        Args:
            sources: 图片来源，支持 ItemSource 或本地路径
            strict: 遇到不支持的类型时是否抛出异常

        Returns:
            list[InputItem]: 实际加入的项，按加入顺序

        Raises:
            UnsupportedMediaTypeError: strict 模式下遇到不支持的类型
            SourceReadError: 本地路径不存在或无法读取
        """
        accepted: list[InputItem] = []

        for source in sources:
            if not isinstance(source, ItemSource):
                try:
                    source = ItemSource.from_path(source)
                except OSError as e:
                    raise SourceReadError(
                        MessageFormatter.operation_failed("读取图片", source, e),
                        path=str(source),
                    ) from e

            item = self._build_item(source)
            if item is None:
                message = MessageFormatter.unsupported_media_type(
                    source.name, source.media_type
                )
                if strict:
                    raise UnsupportedMediaTypeError(message, name=source.name)
                logger.debug(message)
                continue
            accepted.append(item)

        for item in accepted:
            self._items[item.id] = item

        if accepted:
            logger.debug(f"加入 {len(accepted)} 个项目，当前共 {len(self._items)} 个")
        return accepted

    def remove(self, item_id: str) -> InputItem:
        """移除单个项目

        Raises:
            NotFoundError: 项目不存在
        """
        try:
            return self._items.pop(item_id)
        except KeyError:
            raise NotFoundError(
                MessageFormatter.item_not_found(item_id), key=item_id
            ) from None

    def get(self, item_id: str) -> InputItem:
        """按 id 获取项目

        Raises:
            NotFoundError: 项目不存在
        """
        try:
            return self._items[item_id]
        except KeyError:
            raise NotFoundError(
                MessageFormatter.item_not_found(item_id), key=item_id
            ) from None

    def clear(self) -> None:
        self._items.clear()

    def list(self) -> tuple[InputItem, ...]:
        """按加入顺序返回只读视图"""
        return tuple(self._items.values())

    @property
    def total_size(self) -> int:
        return sum(item.byte_size for item in self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[InputItem]:
        return iter(self.list())

    @staticmethod
    def _build_item(source: ItemSource) -> InputItem | None:
        fmt = detect_image_format(source.name, source.content, source.media_type)
        if not ImageFormats.is_accepted(fmt):
            return None
        declared = source.media_type
        media_type = (
            declared.split(";", 1)[0].strip().lower()
            if declared and ImageFormats.from_mime_type(declared)
            else ImageFormats.get_mime_type(fmt)
        )
        return InputItem.from_source(source, media_type)
