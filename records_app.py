import json
import logging

import flet as ft

from commands import invoke
from record_item import RecordItem

logger = logging.getLogger(__name__)

FILTER_ALL = "全部"
FILTER_ACTIVE = "进行中"
FILTER_DONE = "已完成"


def _has_id(record) -> bool:
    # bool 也是 int 的子类，不能当作 id
    return isinstance(record, dict) and type(record.get("id")) is int


def parse_records(text: str) -> list[dict]:
    """把 load_records 返回的文本解析为记录列表，缺少 id 或 id 重复的记录按顺序补上新 id。"""
    records = json.loads(text)
    if not isinstance(records, list):
        raise ValueError("记录文件内容不是 JSON 数组")
    next_id = max((r["id"] for r in records if _has_id(r)), default=0) + 1
    result = []
    seen = set()
    for item in records:
        if not isinstance(item, dict):
            raise ValueError(f"无效的记录: {item!r}")
        record = dict(item)
        if not _has_id(record) or record["id"] in seen:
            record["id"] = next_id
            next_id += 1
        seen.add(record["id"])
        result.append(record)
    return result


def dump_records(records: list[dict]) -> str:
    return json.dumps(records, ensure_ascii=False)


def next_record_id(records: list[dict]) -> int:
    return max((r["id"] for r in records), default=0) + 1


class RecordsApp(ft.Column):
    def __init__(self, page: ft.Page, records_path: str):
        super().__init__()
        self.page = page
        self.records_data = []
        # 只有成功加载过当前文件才允许保存，避免覆盖读不出来的文件
        self.can_save = False

        self.path_field = ft.TextField(
            label="记录文件",
            value=records_path,
            expand=True,
            on_submit=self.load_clicked,
        )
        self.new_record = ft.TextField(
            hint_text="输入新记录…",
            on_submit=self.add_clicked,
            expand=True,
            border_radius=24,
            filled=True,
            bgcolor=ft.Colors.WHITE,
            content_padding=ft.padding.symmetric(horizontal=18, vertical=14),
            multiline=False,
            shift_enter=False
        )
        self.records = ft.Column(spacing=6)

        self.filter = ft.Tabs(
            scrollable=False,
            selected_index=0,
            on_change=self.tabs_changed,
            tabs=[ft.Tab(text=FILTER_ALL), ft.Tab(text=FILTER_ACTIVE), ft.Tab(text=FILTER_DONE)],
        )

        self.items_left = ft.Text("0 条记录未完成")
        self.status_text = ft.Text("", size=13)

        self.width = 600
        self.controls = [
            ft.Container(
                content=ft.Text("记录清单", size=24, weight=ft.FontWeight.W_600),
                padding=ft.padding.only(left=16, top=8, bottom=8)
            ),
            # 文件路径
            ft.Container(
                content=ft.Row(
                    controls=[
                        self.path_field,
                        ft.OutlinedButton(text="加载", icon=ft.Icons.FOLDER_OPEN, on_click=self.load_clicked),
                    ],
                    spacing=8
                ),
                padding=ft.padding.symmetric(horizontal=16, vertical=6)
            ),
            # 输入栏
            ft.Container(
                content=ft.Row(
                    controls=[
                        self.new_record,
                        ft.FloatingActionButton(
                            icon=ft.Icons.ADD,
                            on_click=self.add_clicked,
                            mini=True,
                            bgcolor=ft.Colors.BLUE
                        ),
                    ],
                    spacing=8
                ),
                padding=ft.padding.symmetric(horizontal=16, vertical=6)
            ),
            ft.Container(content=self.status_text, padding=ft.padding.symmetric(horizontal=16)),
            ft.Divider(height=1, thickness=1, color=ft.Colors.BLUE_GREY_200),
            ft.Column(
                spacing=25,
                controls=[
                    self.filter,
                    self.records,
                    ft.Row(
                        alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                        vertical_alignment=ft.CrossAxisAlignment.CENTER,
                        controls=[
                            self.items_left,
                            ft.OutlinedButton(
                                text="清除已完成", on_click=self.clear_clicked
                            ),
                        ],
                    ),
                ],
            ),
        ]
        self.load_records(initial=True)  # 控件尚未加入页面，不调用update

    @property
    def records_path(self) -> str:
        return self.path_field.value or ""

    def update_status(self, message, color=ft.Colors.BLUE, initial=False):
        self.status_text.value = message
        self.status_text.color = color
        if not initial:
            self.page.update()

    def load_records(self, initial=False):
        self.can_save = False
        text, error = invoke("load_records", {"path": self.records_path})
        if error:
            logger.error(f"加载记录失败: {error}")
            self.records_data = []
            self.build_list(initial=initial)
            self.update_status(f"加载失败: {error}（已停止保存，以免覆盖原文件）", ft.Colors.RED, initial=initial)
            return
        try:
            self.records_data = parse_records(text)
        except ValueError as e:
            # json.JSONDecodeError 也是 ValueError
            logger.error(f"记录文件格式错误: {e}")
            self.records_data = []
            self.build_list(initial=initial)
            self.update_status(f"记录文件格式错误: {e}（已停止保存，以免覆盖原文件）", ft.Colors.RED, initial=initial)
            return
        self.can_save = True
        self.build_list(initial=initial)
        self.update_status(f"已加载 {len(self.records_data)} 条记录", ft.Colors.GREEN, initial=initial)

    def save_records(self) -> bool:
        if not self.can_save:
            logger.warning(f"记录文件未成功加载，跳过保存: {self.records_path}")
            self.update_status("记录文件未成功加载，未保存。请修正文件或更换路径后重新加载", ft.Colors.RED)
            return False
        _, error = invoke(
            "save_records",
            {"req": {"path": self.records_path, "data": dump_records(self.records_data)}},
        )
        if error:
            logger.error(f"保存记录失败: {error}")
            self.update_status(f"保存失败: {error}", ft.Colors.RED)
            return False
        self.update_status("已保存", ft.Colors.GREEN)
        return True

    def build_list(self, initial=False):
        self.records.controls.clear()
        if not self.records_data:
            self.records.controls.append(
                ft.Container(
                    content=ft.Text("暂无记录，快来添加吧！", size=16, color=ft.Colors.GREY),
                    alignment=ft.alignment.center,
                    padding=ft.padding.only(top=40)
                )
            )
        else:
            for record in self.records_data:
                self.records.controls.append(
                    RecordItem(record, self.record_changed, self.record_delete)
                )
        self.update_filter(initial=initial)

    def load_clicked(self, e):
        self.load_records()

    def add_clicked(self, e):
        if self.new_record.value and self.new_record.value.strip():
            self.records_data.append({
                "id": next_record_id(self.records_data),
                "text": self.new_record.value.strip(),
                "done": False,
            })
            self.new_record.value = ""
            self.new_record.focus()
            self.build_list()
            self.save_records()

    def record_changed(self, item: RecordItem):
        for i, record in enumerate(self.records_data):
            if record["id"] == item.record_id:
                # 保留记录中前端不认识的字段
                self.records_data[i] = {**record, **item.to_record()}
                break
        self.update_filter()
        self.save_records()

    def record_delete(self, item: RecordItem):
        self.records_data = [r for r in self.records_data if r["id"] != item.record_id]
        self.build_list()
        self.save_records()

    def tabs_changed(self, e):
        self.update_filter()

    def clear_clicked(self, e):
        self.records_data = [r for r in self.records_data if not r.get("done")]
        self.build_list()
        self.save_records()

    def update_filter(self, initial=False):
        status = self.filter.tabs[self.filter.selected_index].text
        count = 0
        has_visible = False

        for item in self.records.controls:
            if isinstance(item, RecordItem):
                visible = (
                    status == FILTER_ALL
                    or (status == FILTER_ACTIVE and not item.done)
                    or (status == FILTER_DONE and item.done)
                )
                item.visible = visible
                if visible:
                    has_visible = True
                if not item.done:
                    count += 1
            else:
                # "暂无记录"提示
                item.visible = not has_visible

        self.items_left.value = f"{count} 条记录未完成"

        if not initial:
            self.page.update()
