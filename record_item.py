import flet as ft


def _text_style(done: bool) -> ft.TextStyle:
    return ft.TextStyle(
        decoration=ft.TextDecoration.LINE_THROUGH if done else None,
        color=ft.Colors.GREY if done else None,
        overflow=ft.TextOverflow.ELLIPSIS,
        weight=ft.FontWeight.W_400
    )


class RecordItem(ft.Column):
    def __init__(self, record: dict, record_changed, record_delete):
        super().__init__()
        self.record_id = record["id"]
        self.text = record.get("text", "")
        self.done = bool(record.get("done", False))
        self.record_changed = record_changed
        self.record_delete = record_delete

        self.checkbox = ft.Checkbox(
            value=self.done,
            on_change=self.status_changed,
        )
        self.record_text = ft.Text(
            value=self.text,
            text_align=ft.TextAlign.LEFT,
            style=_text_style(self.done),
        )

        # 点击文本同样切换完成状态
        text_container = ft.Container(
            content=self.record_text,
            expand=True,
            padding=ft.padding.only(left=8),
            on_click=self.text_clicked
        )

        self.edit_text = ft.TextField(
            expand=1,
            multiline=False,
            on_submit=self.save_clicked
        )

        # 记录显示视图
        self.display_view = ft.Container(
            content=ft.Row(
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                vertical_alignment=ft.CrossAxisAlignment.START,
                controls=[
                    ft.Container(
                        content=ft.Row(
                            controls=[self.checkbox, text_container],
                            alignment=ft.MainAxisAlignment.START,
                            vertical_alignment=ft.CrossAxisAlignment.CENTER,
                            spacing=0,
                            expand=True,
                        ),
                        expand=True,
                    ),
                    ft.Row(
                        spacing=0,
                        controls=[
                            ft.IconButton(
                                icon=ft.Icons.CREATE_OUTLINED,
                                tooltip="编辑记录",
                                on_click=self.edit_clicked,
                                icon_size=22,
                            ),
                            ft.IconButton(
                                ft.Icons.DELETE_OUTLINE,
                                tooltip="删除记录",
                                on_click=self.delete_clicked,
                                icon_size=22,
                            ),
                        ],
                    ),
                ],
            ),
            padding=14,
            bgcolor=ft.Colors.WHITE,
            border_radius=12,
            shadow=ft.BoxShadow(
                blur_radius=4,
                color=ft.Colors.BLACK12,
                offset=ft.Offset(0, 2)
            ),
        )

        # 记录编辑视图
        self.edit_view = ft.Container(
            visible=False,
            content=ft.Row(
                alignment=ft.MainAxisAlignment.SPACE_BETWEEN,
                vertical_alignment=ft.CrossAxisAlignment.START,
                controls=[
                    self.edit_text,
                    ft.IconButton(
                        icon=ft.Icons.DONE_OUTLINE_OUTLINED,
                        icon_color=ft.Colors.GREEN,
                        tooltip="更新记录",
                        on_click=self.save_clicked,
                        icon_size=22,
                    ),
                ],
            ),
            padding=14,
            bgcolor=ft.Colors.WHITE,
            border_radius=12,
        )
        self.controls = [self.display_view, self.edit_view]

    def to_record(self) -> dict:
        return {"id": self.record_id, "text": self.text, "done": self.done}

    def edit_clicked(self, e):
        self.edit_text.value = self.text
        self.display_view.visible = False
        self.edit_view.visible = True
        self.update()

    def save_clicked(self, e):
        new_text = (self.edit_text.value or "").strip()
        if new_text:
            self.text = new_text
            self.record_text.value = new_text
        self.display_view.visible = True
        self.edit_view.visible = False
        self.record_changed(self)
        self.update()

    def set_done(self, done: bool):
        self.done = done
        self.checkbox.value = done
        self.record_text.style = _text_style(done)

    def status_changed(self, e):
        self.set_done(bool(self.checkbox.value))
        self.record_changed(self)
        self.update()

    def text_clicked(self, e):
        self.set_done(not self.done)
        self.record_changed(self)
        self.update()

    def delete_clicked(self, e):
        self.record_delete(self)
