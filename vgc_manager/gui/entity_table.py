"""
EntityTable — read-only grid bound to an EntityListViewModel.

Columns, header labels and widths come from the entity descriptor.
Clicking a header sorts the visible rows; every cell carries its entity id
(UserRole), so selection maps through the id rather than the row index.
Selecting a row forwards the entity id to the view model; the tab's
buttons follow the view model's can_edit / can_delete state.

Signals (all carry the entity id):
  details_requested(int) — double-click or context menu "Details"
  edit_requested(int)    — context menu "Edit"
  delete_requested(int)  — context menu "Delete"
"""

from __future__ import annotations

from typing import Optional

from PyQt6.QtCore import QPoint, Qt, pyqtSignal
from PyQt6.QtGui import QAction
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QHeaderView,
    QMenu,
    QTableWidget,
    QTableWidgetItem,
)

from vgc_manager.gui.view_models import EntityListViewModel


class _Cell(QTableWidgetItem):
    """Numeric cells (ID, generation) sort by value, everything else by text."""

    def __lt__(self, other: QTableWidgetItem) -> bool:
        mine, theirs = self.text(), other.text()
        if mine.isdigit() and theirs.isdigit():
            return int(mine) < int(theirs)
        return mine.lower() < theirs.lower()


class EntityTable(QTableWidget):

    details_requested = pyqtSignal(int)
    edit_requested = pyqtSignal(int)
    delete_requested = pyqtSignal(int)

    def __init__(self, view_model: EntityListViewModel, parent=None) -> None:
        super().__init__(parent)
        self._vm = view_model
        self._rendering = False
        self._shown: tuple[list, list] = ([], [])

        self.setColumnCount(len(view_model.headers))
        self.setHorizontalHeaderLabels(view_model.headers)
        for col, width in enumerate(view_model.column_widths):
            self.setColumnWidth(col, width)
        self.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Interactive)
        self.horizontalHeader().setStretchLastSection(True)
        self.verticalHeader().setVisible(False)

        self.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
        self.setAlternatingRowColors(True)
        self.horizontalHeader().setSortIndicator(-1, Qt.SortOrder.AscendingOrder)
        self.setSortingEnabled(True)
        self.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)

        self.itemSelectionChanged.connect(self._on_selection_changed)
        self.cellDoubleClicked.connect(self._on_double_clicked)
        self.customContextMenuRequested.connect(self._on_context_menu)

        view_model.subscribe(self.refresh_view)
        self.refresh_view()

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def refresh_view(self) -> None:
        """Rebuild cells from the view model and restore its selection."""
        self._rendering = True
        try:
            rows = self._vm.rows()
            ids = [item.id for item in self._vm.items]
            if (ids, rows) != self._shown:
                # Qt re-sorts on every setItem while sorting is enabled.
                self.setSortingEnabled(False)
                self.clearContents()
                self.setRowCount(len(rows))
                for r, (entity_id, cells) in enumerate(zip(ids, rows)):
                    for c, text in enumerate(cells):
                        cell = _Cell(text)
                        cell.setData(Qt.ItemDataRole.UserRole, entity_id)
                        self.setItem(r, c, cell)
                self.setSortingEnabled(True)
                self._shown = (ids, rows)

            selected_row = (
                self.row_of(self._vm.selected_id)
                if self._vm.selected_id is not None else None
            )
            if selected_row is None:
                self.clearSelection()
            elif self.currentRow() != selected_row or not self.selectedIndexes():
                self.selectRow(selected_row)
        finally:
            self._rendering = False

    def id_at(self, row: int) -> Optional[int]:
        """Entity id shown on a visual row, after any header sort."""
        cell = self.item(row, 0)
        return cell.data(Qt.ItemDataRole.UserRole) if cell is not None else None

    def row_of(self, entity_id: int) -> Optional[int]:
        return next((r for r in range(self.rowCount()) if self.id_at(r) == entity_id), None)

    # ------------------------------------------------------------------
    # Event handlers
    # ------------------------------------------------------------------

    def _on_selection_changed(self) -> None:
        if self._rendering:
            return
        rows = {index.row() for index in self.selectedIndexes()}
        self._vm.select(self.id_at(min(rows)) if rows else None)

    def _on_double_clicked(self, row: int, column: int) -> None:
        self._vm.select(self.id_at(row))
        if self._vm.selected_id is not None:
            self.details_requested.emit(self._vm.selected_id)

    def _on_context_menu(self, pos: QPoint) -> None:
        row = self.rowAt(pos.y())
        if row < 0:
            return
        self._vm.select(self.id_at(row))
        entity_id = self._vm.selected_id
        if entity_id is None:
            return

        menu = QMenu(self)
        act_details = QAction("Details", menu)
        act_details.triggered.connect(lambda: self.details_requested.emit(entity_id))
        act_edit = QAction("Edit", menu)
        act_edit.triggered.connect(lambda: self.edit_requested.emit(entity_id))
        act_delete = QAction("Delete", menu)
        act_delete.triggered.connect(lambda: self.delete_requested.emit(entity_id))
        menu.addAction(act_details)
        menu.addAction(act_edit)
        menu.addSeparator()
        menu.addAction(act_delete)
        menu.exec(self.viewport().mapToGlobal(pos))
