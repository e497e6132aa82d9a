"""
LookupDialog — modal dialog for adding a reference row ("+ New" buttons).

Collects:
  - Name (required) for genres, developers, composers, publishers,
    producers, manufacturers, console types and accessory types
  - Region (required), code (required) and description for rating systems

The dialog writes through the supplied callback so that a database error
keeps it open with the typed values intact.
"""

from __future__ import annotations

from typing import Any, Callable

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)

from vgc_manager.core.entities import RATING_REGIONS, LookupSpec
from vgc_manager.core.exceptions import CollectionError


class LookupDialog(QDialog):
    """Dialog for entering one new lookup row."""

    def __init__(
        self,
        spec: LookupSpec,
        on_save: Callable[..., Any],
        region: str = "",
        parent=None,
    ) -> None:
        super().__init__(parent)
        self._spec = spec
        self._on_save = on_save
        self.created: Any = None
        self.setWindowTitle(f"Add {spec.label}")
        self.setMinimumWidth(360)
        self.setModal(True)
        self._build_ui(region)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_ui(self, region: str) -> None:
        layout = QVBoxLayout(self)
        layout.setSpacing(12)
        layout.setContentsMargins(20, 16, 20, 16)

        header = QLabel(f"Add New {self._spec.label}")
        header_font = QFont()
        header_font.setBold(True)
        header_font.setPointSize(11)
        header.setFont(header_font)
        layout.addWidget(header)

        separator = QWidget()
        separator.setFixedHeight(1)
        separator.setStyleSheet("background-color: #DDDDDD;")
        layout.addWidget(separator)

        form = QFormLayout()
        form.setSpacing(10)
        form.setLabelAlignment(Qt.AlignmentFlag.AlignRight)

        if "region" in self._spec.fields:
            self._region_combo = QComboBox()
            self._region_combo.addItems(RATING_REGIONS)
            if region in RATING_REGIONS:
                self._region_combo.setCurrentText(region)
            form.addRow("Region *:", self._region_combo)

            self._code_edit = QLineEdit()
            self._code_edit.setPlaceholderText("e.g. PEGI 12")
            form.addRow("Code *:", self._code_edit)

            self._desc_edit = QLineEdit()
            self._desc_edit.setPlaceholderText("optional")
            form.addRow("Description:", self._desc_edit)
            self._required_edit = self._code_edit
        else:
            self._name_edit = QLineEdit()
            self._name_edit.setPlaceholderText(f"{self._spec.label} name")
            self._name_edit.setMinimumWidth(220)
            form.addRow("Name *:", self._name_edit)
            self._required_edit = self._name_edit

        self._error_lbl = QLabel("")
        self._error_lbl.setStyleSheet("color: #CC0000; font-size: 11px;")
        form.addRow("", self._error_lbl)
        layout.addLayout(form)

        self._buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        self._buttons.button(QDialogButtonBox.StandardButton.Save).setEnabled(False)
        self._buttons.accepted.connect(self._on_accept)
        self._buttons.rejected.connect(self.reject)
        layout.addWidget(self._buttons)

        self._required_edit.textChanged.connect(self._validate_fields)

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _validate_fields(self) -> None:
        ok = bool(self._required_edit.text().strip())
        self._error_lbl.setText("" if ok else "This field is required.")
        self._buttons.button(QDialogButtonBox.StandardButton.Save).setEnabled(ok)

    # ------------------------------------------------------------------
    # Data access
    # ------------------------------------------------------------------

    def get_data(self) -> dict:
        """Return the collected form data as a dict."""
        if "region" in self._spec.fields:
            return {
                "region": self._region_combo.currentText(),
                "code": self._code_edit.text().strip(),
                "description": self._desc_edit.text().strip(),
            }
        return {"name": self._name_edit.text().strip()}

    def _on_accept(self) -> None:
        self._validate_fields()
        if not self._required_edit.text().strip():
            return
        try:
            self.created = self._on_save(**self.get_data())
        except CollectionError as exc:
            QMessageBox.critical(self, "Error", str(exc))
            return
        self.accept()
