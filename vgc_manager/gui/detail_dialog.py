"""
DetailDialog — read-only view of one game, console or accessory.

Rows come from view_models.detail_rows(); every descriptor field is listed
under its section header. "Edit" closes the dialog with edit_requested set
so the owning tab can open the form for the same entity.
"""

from __future__ import annotations

from typing import Any

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QFrame,
    QLabel,
    QPushButton,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from vgc_manager.core.entities import EntityDescriptor
from vgc_manager.gui.view_models import detail_rows


class DetailDialog(QDialog):

    def __init__(self, descriptor: EntityDescriptor, entity: Any, parent=None) -> None:
        super().__init__(parent)
        self.edit_requested = False
        self.setWindowTitle(f"{descriptor.label} Details")
        self.resize(520, 640)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        title = QLabel(descriptor.title_of(entity))
        title_font = QFont()
        title_font.setBold(True)
        title_font.setPointSize(14)
        title.setFont(title_font)
        title.setContentsMargins(16, 12, 16, 4)
        title.setWordWrap(True)
        layout.addWidget(title)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)
        container = QWidget()
        form = QFormLayout(container)
        form.setContentsMargins(16, 4, 16, 12)
        form.setLabelAlignment(Qt.AlignmentFlag.AlignRight)

        section = ""
        for row_section, label, text in detail_rows(descriptor, entity):
            if row_section and row_section != section:
                header = QLabel(row_section)
                f = QFont()
                f.setBold(True)
                header.setFont(f)
                header.setContentsMargins(0, 8, 0, 0)
                form.addRow(header)
            section = row_section

            value = QLabel(text)
            value.setWordWrap(True)
            value.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            form.addRow(f"{label}:", value)

        scroll.setWidget(container)
        layout.addWidget(scroll)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.setContentsMargins(16, 8, 16, 12)
        btn_edit = QPushButton("Edit")
        buttons.addButton(btn_edit, QDialogButtonBox.ButtonRole.ActionRole)
        btn_edit.clicked.connect(self._on_edit)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)

    def _on_edit(self) -> None:
        self.edit_requested = True
        self.accept()
