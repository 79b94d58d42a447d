"""
Chart Widget (QGraphicsView Render Surface)
"""
from __future__ import annotations

import calendar
import logging
from typing import Optional, TYPE_CHECKING

from PySide6.QtCore import QPoint, QPointF, QRectF, Qt
from PySide6.QtGui import QBrush, QColor, QPainter, QPen, QResizeEvent
from PySide6.QtWidgets import (
    QGraphicsEllipseItem, QGraphicsItem, QGraphicsItemGroup, QGraphicsLineItem, QGraphicsRectItem,
    QGraphicsScene, QGraphicsSimpleTextItem, QGraphicsView, QLabel, QWidget
)

from scatterheat import config
from scatterheat.controller.geometry import ShapeKind, VisualAttributes, VisualElement
from scatterheat.controller.scales import ScaleSet, TimeScale, duration_step
from scatterheat.model.records import ChartVariant, format_duration

if TYPE_CHECKING:
    from scatterheat.controller.chart import ChartContext
    from scatterheat.controller.interaction import InteractionController

logger = logging.getLogger(__name__)

# Item data roles (QGraphicsItem.data / setData)
ROLE_ID = 0
ROLE_CLASS = 1
ROLE_X_VALUE = 2
ROLE_Y_VALUE = 3
ROLE_INDEX = 4
ROLE_VARIANT = 5
ROLE_TEMP = 6

# Attribute names exposed per variant, in (x, y) order
ATTRIBUTE_NAMES: dict[ChartVariant, tuple[str, str]] = {
    ChartVariant.SCATTER: ("data-xvalue", "data-yvalue"),
    ChartVariant.HEATMAP: ("data-year", "data-month"),
}

TICK_SIZE = 6
HEATMAP_YEAR_TICK = 10


def item_attribute(item: QGraphicsItem, name: str) -> Optional[str]:
    """Read a `data-*` attribute from a rendered shape, whichever variant it is."""
    for variant, (x_name, y_name) in ATTRIBUTE_NAMES.items():
        if name == x_name and item.data(ROLE_VARIANT) == variant:
            return item.data(ROLE_X_VALUE)
        if name == y_name and item.data(ROLE_VARIANT) == variant:
            return item.data(ROLE_Y_VALUE)
    if name == "data-temp" and item.data(ROLE_VARIANT) == ChartVariant.HEATMAP:
        return item.data(ROLE_TEMP)
    return None


class _ShapeEvents:
    """Forwards pointer events of a shape item to the interaction controller."""
    element: VisualElement
    controller: InteractionController

    def _setup(self, element: VisualElement, controller: InteractionController, variant: ChartVariant) -> None:
        self.element = element
        self.controller = controller
        self.setAcceptHoverEvents(True)
        self.setPen(QPen(Qt.NoPen))
        self.setData(ROLE_ID, "dot" if element.shape == ShapeKind.CIRCLE else "cell")
        self.setData(ROLE_CLASS, element.color_class)
        self.setData(ROLE_VARIANT, str(variant))
        self.setData(ROLE_X_VALUE, element.x_value)
        self.setData(ROLE_Y_VALUE, element.y_value)
        self.setData(ROLE_INDEX, element.index)
        if element.temperature is not None:
            self.setData(ROLE_TEMP, str(element.temperature))

    def hoverEnterEvent(self, event) -> None:
        self.controller.on_hover(self.element.record)
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event) -> None:
        self.controller.on_hover_end()
        super().hoverLeaveEvent(event)

    def mousePressEvent(self, event) -> None:
        if event.button() == Qt.LeftButton:
            self.controller.on_click(self.element.record)
            event.accept()
            return
        super().mousePressEvent(event)

    def apply(self, attrs: VisualAttributes) -> None:
        self.setBrush(QBrush(QColor(attrs.fill)))
        self.setZValue(2 if attrs.active else 1)


class DotItem(_ShapeEvents, QGraphicsEllipseItem):
    def __init__(self, element: VisualElement, controller: InteractionController, variant: ChartVariant) -> None:
        r = element.width / 2
        super().__init__(element.x - r, element.y - r, element.width, element.height)
        self._setup(element, controller, variant)


class CellItem(_ShapeEvents, QGraphicsRectItem):
    def __init__(self, element: VisualElement, controller: InteractionController, variant: ChartVariant) -> None:
        super().__init__(element.x, element.y, element.width, element.height)
        self._setup(element, controller, variant)


class ChartWidget(QGraphicsView):
    """
    Render surface of one ChartContext. Every geometry change clears the scene
    and rebuilds it: axis groups first, then one item per element.
    """

    def __init__(self, chart: ChartContext, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.chart = chart
        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self.setRenderHint(QPainter.Antialiasing)
        self.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setVerticalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setMouseTracking(True)

        self._items: list[_ShapeEvents] = []
        self.x_axis: Optional[QGraphicsItemGroup] = None
        self.y_axis: Optional[QGraphicsItemGroup] = None

        # Transient tooltip overlay lives on the viewport
        self.tooltip = QLabel(self.viewport())
        self.tooltip.setObjectName("tooltip")
        self.tooltip.setTextFormat(Qt.PlainText)
        self.tooltip.setStyleSheet(
            "QLabel#tooltip { background: rgba(17, 24, 39, 220); color: white; padding: 6px; border-radius: 4px; }"
        )
        self.tooltip.setAttribute(Qt.WA_TransparentForMouseEvents)
        self.tooltip.hide()

        chart.geometry_changed.connect(self.render_chart)
        chart.controller.attributes_changed.connect(self.apply_attributes)

    @property
    def shape_items(self) -> list[_ShapeEvents]:
        return list(self._items)

    # ------------------------------------------------------------------------------
    # Qt events
    # ------------------------------------------------------------------------------

    def resizeEvent(self, event: QResizeEvent) -> None:
        super().resizeEvent(event)
        size = self.viewport().size()
        self.chart.resize(size.width(), size.height())

    # ------------------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------------------

    def tooltip_anchor(self, element: VisualElement) -> QPoint:
        """Viewport position next to the element, kept inside the viewport."""
        pos = self.mapFromScene(QPointF(element.x + element.width, element.y))
        x = min(pos.x() + 8, max(0, self.viewport().width() - self.tooltip.width()))
        y = min(max(0, pos.y() - self.tooltip.height()), max(0, self.viewport().height() - self.tooltip.height()))
        return QPoint(x, y)

    def render_chart(self, scales: ScaleSet, elements: tuple[VisualElement, ...]) -> None:
        self._scene.clear()
        self._items.clear()
        self._scene.setSceneRect(QRectF(0, 0, scales.width, scales.height))

        self.x_axis = self._build_x_axis(scales)
        self.y_axis = self._build_y_axis(scales)

        item_cls = DotItem if scales.variant == ChartVariant.SCATTER else CellItem
        for element in elements:
            item = item_cls(element, self.chart.controller, scales.variant)
            self._scene.addItem(item)
            self._items.append(item)

        logger.debug(f"Rendered {len(self._items)} shapes.")

    def apply_attributes(self, attributes: tuple[VisualAttributes, ...]) -> None:
        if len(attributes) != len(self._items):
            # The controller was attached to a newer pass than the one on screen
            return
        for item, attrs in zip(self._items, attributes):
            item.apply(attrs)

    # ---- axes ----

    def _axis_group(self, name: str) -> QGraphicsItemGroup:
        group = QGraphicsItemGroup()
        group.setData(ROLE_ID, name)
        self._scene.addItem(group)
        return group

    def _add_line(self, group: QGraphicsItemGroup, x0: float, y0: float, x1: float, y1: float) -> None:
        line = QGraphicsLineItem(x0, y0, x1, y1)
        line.setPen(QPen(QColor(config.AXIS_COLOR), 1))
        group.addToGroup(line)

    def _add_label(self, group: QGraphicsItemGroup, text: str, x: float, y: float, align: Qt.AlignmentFlag) -> None:
        label = QGraphicsSimpleTextItem(text)
        label.setBrush(QBrush(QColor(config.AXIS_COLOR)))
        rect = label.boundingRect()
        if align == Qt.AlignHCenter:
            label.setPos(x - rect.width() / 2, y)
        else:  # right-aligned, vertically centred
            label.setPos(x - rect.width(), y - rect.height() / 2)
        group.addToGroup(label)

    def _build_x_axis(self, scales: ScaleSet) -> QGraphicsItemGroup:
        group = self._axis_group("x-axis")
        r0, r1 = scales.x.range
        if scales.variant == ChartVariant.SCATTER:
            baseline = scales.y_offset + scales.plot_height
            ticks = [(scales.x(d), str(d.year)) for d in scales.x.ticks()] if isinstance(scales.x, TimeScale) else []
        else:
            baseline = scales.height - scales.padding
            lo, hi = scales.x.domain
            first = -(-int(lo) // HEATMAP_YEAR_TICK) * HEATMAP_YEAR_TICK
            ticks = [(scales.x(y + 0.5), str(y)) for y in range(first, int(hi), HEATMAP_YEAR_TICK)]

        self._add_line(group, r0, baseline, r1, baseline)
        for px, text in ticks:
            self._add_line(group, px, baseline, px, baseline + TICK_SIZE)
            self._add_label(group, text, px, baseline + TICK_SIZE + 2, Qt.AlignHCenter)
        return group

    def _build_y_axis(self, scales: ScaleSet) -> QGraphicsItemGroup:
        group = self._axis_group("y-axis")
        x = scales.padding
        if scales.variant == ChartVariant.SCATTER:
            offset = scales.y_offset
            ticks = [(scales.y(s) + offset, format_duration(s)) for s in scales.y.ticks(step_fn=duration_step)]
            top, bottom = offset + scales.y.range[0], offset + scales.y.range[1]
        else:
            ticks = [(scales.y(m + 0.5), calendar.month_name[m + 1]) for m in range(12)]
            top, bottom = scales.y.range

        self._add_line(group, x, top, x, bottom)
        for py, text in ticks:
            self._add_line(group, x - TICK_SIZE, py, x, py)
            self._add_label(group, text, x - TICK_SIZE - 2, py, Qt.AlignRight)
        return group
