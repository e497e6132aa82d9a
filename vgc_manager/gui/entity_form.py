"""
EntityFormDialog — add / edit dialog built from an entity descriptor.

Builds a QScrollArea with a QFormLayout populated entirely from the
descriptor's FieldSpec list, grouped under section headers.

Widget types per field kind:
  text / integer / decimal / date → QLineEdit (parsed by ValidationEngine on save)
  multiline → QTextEdit
  bool      → QCheckBox
  condition → QSlider 0..5 with a star label (0 = not graded)
  lookup    → QComboBox, plus "+ New" for creatable reference tables
  many      → _RelationPicker: dropdown + Add / Clear / + New, staged list label

Save flow:
  widgets → EntityFormViewModel.values → vm.save()
  ValidationError / PersistenceError → modal error, dialog stays open with
  every value intact; success → accept().
"""

from __future__ import annotations

import logging
from typing import Optional

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import (
    QCheckBox,
    QComboBox,
    QDialog,
    QDialogButtonBox,
    QFormLayout,
    QFrame,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QScrollArea,
    QSlider,
    QTextEdit,
    QVBoxLayout,
    QWidget,
)

from vgc_manager.core.entities import LOOKUPS, FieldKind, FieldSpec
from vgc_manager.core.exceptions import CollectionError, ValidationError
from vgc_manager.core.formatting import MAX_CONDITION
from vgc_manager.gui.lookup_dialog import LookupDialog
from vgc_manager.gui.view_models import EntityFormViewModel

logger = logging.getLogger("vgc.entity_form")

_PLACEHOLDERS = {
    FieldKind.DATE: "YYYY-MM-DD",
    FieldKind.INTEGER: "0",
    FieldKind.DECIMAL: "0.00",
}


# ---------------------------------------------------------------------------
# Composite inputs
# ---------------------------------------------------------------------------

class _ConditionInput(QWidget):
    """Slider 0..5 with a live star label."""

    def __init__(self, vm: EntityFormViewModel, parent=None) -> None:
        super().__init__(parent)
        self._vm = vm
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        self.slider = QSlider(Qt.Orientation.Horizontal)
        self.slider.setRange(0, MAX_CONDITION)
        self.slider.setSingleStep(1)
        self.slider.setPageStep(1)
        self.slider.setTickPosition(QSlider.TickPosition.TicksBelow)
        self.slider.setValue(int(vm.values.get("condition") or 0))
        self.label = QLabel(vm.condition_text())
        self.label.setMinimumWidth(130)

        layout.addWidget(self.slider)
        layout.addWidget(self.label)
        self.slider.valueChanged.connect(self._on_changed)

    def _on_changed(self, value: int) -> None:
        self._vm.set_value("condition", value)
        self.label.setText(self._vm.condition_text())


class _RelationPicker(QWidget):
    """Stage many-to-many selections; nothing is written until the form saves."""

    def __init__(self, vm: EntityFormViewModel, spec: FieldSpec, dialog: "EntityFormDialog") -> None:
        super().__init__(dialog)
        self._vm = vm
        self._spec = spec
        self._dialog = dialog

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(2)

        row = QHBoxLayout()
        self.combo = QComboBox()
        self.combo.setMinimumWidth(200)
        self.btn_add = QPushButton("Add")
        self.btn_clear = QPushButton("Clear")
        row.addWidget(self.combo, 1)
        row.addWidget(self.btn_add)
        row.addWidget(self.btn_clear)
        if LOOKUPS[spec.lookup].creatable:
            self.btn_new = QPushButton("+ New")
            self.btn_new.clicked.connect(lambda: dialog.create_lookup(spec))
            row.addWidget(self.btn_new)
        layout.addLayout(row)

        self.list_label = QLabel()
        self.list_label.setWordWrap(True)
        self.list_label.setStyleSheet("color: #444; font-size: 11px;")
        layout.addWidget(self.list_label)

        self.btn_add.clicked.connect(self._on_add)
        self.btn_clear.clicked.connect(lambda: self._vm.clear_related(spec.name))
        self.sync()

    def sync(self) -> None:
        _fill_combo(self.combo, self._vm.options_for(self._spec), None, f"Select {self._spec.label.lower()}")
        self.list_label.setText(self._vm.related_text(self._spec.name))

    def _on_add(self) -> None:
        if self._vm.add_related(self._spec.name, self.combo.currentData()):
            self.combo.setCurrentIndex(0)


def _fill_combo(
    combo: QComboBox,
    options: list[tuple[int, str]],
    selected: Optional[int],
    placeholder: str,
) -> None:
    combo.blockSignals(True)
    combo.clear()
    combo.addItem(placeholder, userData=None)
    for option_id, label in options:
        combo.addItem(label, userData=option_id)
    idx = combo.findData(selected) if selected is not None else 0
    combo.setCurrentIndex(max(idx, 0))
    combo.blockSignals(False)


# ---------------------------------------------------------------------------
# Dialog
# ---------------------------------------------------------------------------

class EntityFormDialog(QDialog):
    """
    Modal add / edit form. Call load_options() on the view model before
    constructing; the caller reports PersistenceError from that step.
    """

    def __init__(self, view_model: EntityFormViewModel, parent=None) -> None:
        super().__init__(parent)
        self._vm = view_model
        self._widgets: dict[str, QWidget] = {}
        self._lookup_combos: dict[str, QComboBox] = {}
        self._pickers: dict[str, _RelationPicker] = {}
        self.saved_id: Optional[int] = None

        self.setWindowTitle(view_model.title)
        self.setModal(True)
        self.resize(600, 700)
        self._build_ui()
        view_model.subscribe(self._sync_options)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        outer = QVBoxLayout(self)
        outer.setContentsMargins(0, 0, 0, 0)
        outer.setSpacing(0)

        scroll = QScrollArea()
        scroll.setWidgetResizable(True)
        scroll.setFrameShape(QFrame.Shape.NoFrame)

        container = QWidget()
        self._form_layout = QFormLayout(container)
        self._form_layout.setSpacing(8)
        self._form_layout.setContentsMargins(16, 12, 16, 12)
        self._form_layout.setLabelAlignment(
            Qt.AlignmentFlag.AlignRight | Qt.AlignmentFlag.AlignVCenter
        )
        self._form_layout.setFieldGrowthPolicy(
            QFormLayout.FieldGrowthPolicy.ExpandingFieldsGrow
        )
        scroll.setWidget(container)
        outer.addWidget(scroll)

        current_section = None
        for spec in self._vm.descriptor.fields:
            if spec.section and spec.section != current_section:
                self._add_section_header(spec.section)
            current_section = spec.section

            widget = self._create_widget(spec)
            self._widgets[spec.name] = widget
            label = QLabel(spec.label + (" *" if spec.required else "") + ":")
            self._form_layout.addRow(label, widget)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel
        )
        buttons.setContentsMargins(16, 8, 16, 12)
        buttons.accepted.connect(self._on_save)
        buttons.rejected.connect(self.reject)
        outer.addWidget(buttons)

    def _add_section_header(self, title: str) -> None:
        lbl = QLabel(title)
        f = QFont()
        f.setBold(True)
        lbl.setFont(f)
        lbl.setContentsMargins(0, 8, 0, 0)
        self._form_layout.addRow(lbl)

    def _create_widget(self, spec: FieldSpec) -> QWidget:
        value = self._vm.values.get(spec.name)

        if spec.kind == FieldKind.MULTILINE:
            edit = QTextEdit()
            edit.setPlainText(value or "")
            edit.setFixedHeight(80)
            return edit

        if spec.kind == FieldKind.BOOL:
            check = QCheckBox()
            check.setChecked(bool(value))
            return check

        if spec.kind == FieldKind.CONDITION:
            return _ConditionInput(self._vm, self)

        if spec.kind == FieldKind.LOOKUP:
            combo = QComboBox()
            combo.setMinimumWidth(220)
            placeholder = f"Select {spec.label.lower()}" if spec.required else ""
            _fill_combo(combo, self._vm.options_for(spec), value, placeholder)
            combo.currentIndexChanged.connect(
                lambda _idx, name=spec.name, c=combo: self._vm.set_value(name, c.currentData())
            )
            self._lookup_combos[spec.name] = combo
            if not LOOKUPS[spec.lookup].creatable:
                return combo
            row = QWidget()
            rl = QHBoxLayout(row)
            rl.setContentsMargins(0, 0, 0, 0)
            rl.addWidget(combo, 1)
            btn_new = QPushButton("+ New")
            btn_new.clicked.connect(lambda: self.create_lookup(spec))
            rl.addWidget(btn_new)
            return row

        if spec.kind == FieldKind.MANY:
            picker = _RelationPicker(self._vm, spec, self)
            self._pickers[spec.name] = picker
            return picker

        edit = QLineEdit()
        edit.setText(value or "")
        edit.setPlaceholderText(_PLACEHOLDERS.get(spec.kind, ""))
        edit.setMinimumWidth(220)
        return edit

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def create_lookup(self, spec: FieldSpec) -> None:
        """'+ New' next to a dropdown: add the row, refresh options, select it."""
        lookup = LOOKUPS[spec.lookup]
        if "region" in lookup.fields:
            on_save = self._vm.create_rating
        else:
            on_save = lambda name: self._vm.create_lookup(lookup.key, name)  # noqa: E731

        self._collect()
        dlg = LookupDialog(lookup, on_save, region=spec.region or "", parent=self)
        if dlg.exec() != QDialog.DialogCode.Accepted or dlg.created is None:
            return
        if spec.kind == FieldKind.LOOKUP:
            self._vm.set_value(spec.name, dlg.created.id)
            combo = self._lookup_combos[spec.name]
            combo.setCurrentIndex(max(combo.findData(dlg.created.id), 0))

    def _sync_options(self) -> None:
        """Re-render dropdowns and staged lists after the view model changes."""
        self._collect()
        for name, combo in self._lookup_combos.items():
            spec = self._vm.descriptor.get_field(name)
            _fill_combo(
                combo,
                self._vm.options_for(spec),
                self._vm.values.get(name),
                combo.itemText(0),
            )
        for picker in self._pickers.values():
            picker.sync()

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def _collect(self) -> None:
        """Copy widget state into the view model."""
        for spec in self._vm.descriptor.fields:
            widget = self._widgets[spec.name]
            if spec.kind == FieldKind.MULTILINE:
                self._vm.set_value(spec.name, widget.toPlainText())
            elif spec.kind == FieldKind.BOOL:
                self._vm.set_value(spec.name, widget.isChecked())
            elif spec.kind == FieldKind.CONDITION:
                self._vm.set_value(spec.name, widget.slider.value())
            elif spec.kind == FieldKind.LOOKUP:
                self._vm.set_value(spec.name, self._lookup_combos[spec.name].currentData())
            elif spec.kind == FieldKind.MANY:
                continue    # staged directly on the view model
            else:
                self._vm.set_value(spec.name, widget.text())

    def _on_save(self) -> None:
        self._collect()
        try:
            self.saved_id = self._vm.save()
        except ValidationError as exc:
            QMessageBox.critical(self, "Invalid input", str(exc))
            widget = self._widgets.get(exc.field or "")
            if widget is not None:
                widget.setFocus()
            return
        except CollectionError as exc:
            logger.error("Save failed: %s", exc)
            QMessageBox.critical(self, "Error", f"Save failed:\n\n{exc}")
            return
        self.accept()
