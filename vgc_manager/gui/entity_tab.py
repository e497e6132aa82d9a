"""
EntityTab — toolbar, search bar and table for one entity kind.

  ┌ [+ Add] [Details] [Edit] [Delete] ───────────── Search: [________] ┐
  │ EntityTable                                                         │
  └ status label (load errors) ─────────────────────────────────────────┘

Details / Edit / Delete follow EntityListViewModel.can_* and are enabled
only while a row is selected. Every successful add, edit or delete reloads
the table and emits collection_changed so the home dashboard can refresh.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from PyQt6.QtCore import pyqtSignal
from PyQt6.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from vgc_manager.core.collection_controller import CollectionController
from vgc_manager.core.exceptions import CollectionError
from vgc_manager.gui.detail_dialog import DetailDialog
from vgc_manager.gui.entity_form import EntityFormDialog
from vgc_manager.gui.entity_table import EntityTable
from vgc_manager.gui.view_models import EntityFormViewModel, EntityListViewModel

logger = logging.getLogger("vgc.entity_tab")


class EntityTab(QWidget):

    collection_changed = pyqtSignal()
    status_message = pyqtSignal(str)

    def __init__(self, controller: CollectionController, kind: str, parent=None) -> None:
        super().__init__(parent)
        self._controller = controller
        self.view_model = EntityListViewModel(controller, kind)
        self._build_ui()
        self.view_model.subscribe(self._sync_state)
        self.view_model.refresh()
        self._sync_state()

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------

    def _build_ui(self) -> None:
        label = self.view_model.descriptor.label
        layout = QVBoxLayout(self)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        toolbar = QHBoxLayout()
        self.btn_add = QPushButton(f"+ Add {label}")
        self.btn_details = QPushButton("Details")
        self.btn_edit = QPushButton("Edit")
        self.btn_delete = QPushButton("Delete")
        for btn in (self.btn_add, self.btn_details, self.btn_edit, self.btn_delete):
            toolbar.addWidget(btn)
        toolbar.addStretch()

        toolbar.addWidget(QLabel("Search:"))
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText(
            "Filter by " + ", ".join(
                f.replace("_name", "").replace("_", " ")
                for f in self.view_model.descriptor.search_fields
            )
        )
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.setMinimumWidth(260)
        toolbar.addWidget(self.search_edit)
        layout.addLayout(toolbar)

        self.table = EntityTable(self.view_model)
        layout.addWidget(self.table)

        self._status_lbl = QLabel("")
        self._status_lbl.setStyleSheet("color: #CC0000; font-size: 11px;")
        self._status_lbl.setVisible(False)
        layout.addWidget(self._status_lbl)

        self.btn_add.clicked.connect(self.add_entity)
        self.btn_details.clicked.connect(lambda: self.show_details(self.view_model.selected_id))
        self.btn_edit.clicked.connect(lambda: self.edit_entity(self.view_model.selected_id))
        self.btn_delete.clicked.connect(lambda: self.delete_entity(self.view_model.selected_id))
        self.search_edit.textChanged.connect(self.view_model.set_search_text)
        self.table.details_requested.connect(self.show_details)
        self.table.edit_requested.connect(self.edit_entity)
        self.table.delete_requested.connect(self.delete_entity)

    def _sync_state(self) -> None:
        vm = self.view_model
        self.btn_details.setEnabled(vm.can_view_details)
        self.btn_edit.setEnabled(vm.can_edit)
        self.btn_delete.setEnabled(vm.can_delete)
        if vm.load_error:
            self._status_lbl.setText(f"Could not load {vm.descriptor.plural.lower()}: {vm.load_error}")
        self._status_lbl.setVisible(bool(vm.load_error))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def add_entity(self) -> None:
        self._open_form(None)

    def edit_entity(self, entity_id: Optional[int]) -> None:
        if entity_id is None:
            return
        self.view_model.select(entity_id)
        try:
            entity = self.view_model.edit_target()
        except CollectionError as exc:
            self._show_error(f"Could not load {self.view_model.descriptor.label.lower()}", exc)
            self.view_model.refresh()
            return
        self._open_form(entity)

    def show_details(self, entity_id: Optional[int]) -> None:
        if entity_id is None:
            return
        descriptor = self.view_model.descriptor
        try:
            entity = self._controller.get_entity(descriptor.key, entity_id)
        except CollectionError as exc:
            self._show_error(f"Could not load {descriptor.label.lower()}", exc)
            self.view_model.refresh()
            return

        dlg = DetailDialog(descriptor, entity, parent=self)
        dlg.exec()
        if dlg.edit_requested:
            self._open_form(entity)

    def delete_entity(self, entity_id: Optional[int]) -> None:
        if entity_id is None:
            return
        vm = self.view_model
        vm.select(entity_id)
        title = vm.title_of_selected()
        label = vm.descriptor.label.lower()

        answer = QMessageBox.question(
            self,
            f"Delete {vm.descriptor.label}",
            f"Are you sure you want to delete {label} '{title}'?",
            QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
            QMessageBox.StandardButton.No,
        )
        if answer != QMessageBox.StandardButton.Yes:
            return

        try:
            vm.delete_selected()
        except CollectionError as exc:
            self._show_error(f"Could not delete {label}", exc)
            vm.refresh()
            return

        QMessageBox.information(
            self, "Deleted", f"{vm.descriptor.label} '{title}' deleted successfully."
        )
        self.status_message.emit(f"Deleted {label} '{title}'.")
        self.collection_changed.emit()

    def refresh(self) -> None:
        self.view_model.refresh()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _open_form(self, entity: Optional[Any]) -> None:
        form_vm = EntityFormViewModel(self._controller, self.view_model.kind, entity)
        try:
            form_vm.load_options()
        except CollectionError as exc:
            self._show_error("Could not load form options", exc)
            return

        dlg = EntityFormDialog(form_vm, parent=self)
        if dlg.exec() != QDialog.DialogCode.Accepted:
            return

        self.view_model.refresh()
        self.view_model.select(dlg.saved_id)
        verb = "updated" if entity is not None else "added"
        self.status_message.emit(
            f"{self.view_model.descriptor.label} {verb} (id {dlg.saved_id})."
        )
        self.collection_changed.emit()

    def _show_error(self, context: str, exc: Exception) -> None:
        logger.error("%s: %s", context, exc)
        QMessageBox.critical(self, "Error", f"{context}:\n\n{exc}")
