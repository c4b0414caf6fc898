"""
Tree Refresher.

Walks the hardware tree once per cycle, updating each device before
descending into its children.
"""

import logging

from .models import Device, HardwareTree


logger = logging.getLogger(__name__)


def refresh_device(device: Device):
    """Update a device, then its children in declared order."""
    device.update()
    for child in device.children:
        refresh_device(child)


def refresh_tree(tree: HardwareTree):
    """
    Refresh every device reachable from the tree roots.

    Errors raised by a device's update are not caught here; the cycle
    that triggered the refresh decides what to do with them.
    """
    for root in tree.roots:
        refresh_device(root)
    logger.debug(f"Refreshed {len(tree.roots)} root devices")
