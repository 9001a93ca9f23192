from __future__ import annotations

from typing import Optional, Tuple, TYPE_CHECKING

from matplotlib.patches import Rectangle

from usim.core.acoustics import DerivedQuantities
from usim.model.layer import LayerStack
from usim.model.transducer import TransducerSettings
from usim.viz.layout import build_layout

if TYPE_CHECKING:  # pragma: no cover - only for type hints
    from matplotlib.figure import Figure, Axes


def _get_axes(fig=None, ax=None):
    import matplotlib.pyplot as plt  # Local import keeps backend selection with the caller
    if fig is None and ax is None:
        fig, ax = plt.subplots(figsize=(5, 8))
    elif fig is not None and ax is None:
        ax = fig.add_subplot()
    elif fig is None:
        fig = ax.figure
    return fig, ax


def plot_stack(stack: LayerStack, derived: Optional[DerivedQuantities] = None, fig=None, ax=None,
               settings: Optional[TransducerSettings] = None, alpha: float = 0.4,
               save: Optional[str] = None, show: bool = False) -> Tuple['Figure', 'Axes']:
    """
    Draw a layer stack as depth bands scaled to the display depth.

    Depth increases downwards; interfaces reflecting more than the visibility
    threshold are drawn as bright lines labelled with their reflection.

    :param stack: Layer stack to draw
    :param derived: Derived quantities of the stack. Computed from ``settings`` when omitted.
    :param fig: Figure to use for plotting. If None, will create with pyplot interface
    :param ax: Axes to use for plotting. If None, will create with pyplot interface
    :param settings: Transducer settings used when ``derived`` is omitted
    :param alpha: Band fill transparency
    :param save: Optional path the figure is written to
    :param show: Whether to show the plot using the pyplot interface. False by default.

    :returns fig, ax: Figure and Axes objects
    """
    layout = build_layout(stack, derived, settings=settings)
    fig, ax = _get_axes(fig, ax)
    depth = layout.display_depth_cm

    for band in layout.bands:
        ax.add_patch(Rectangle((0.0, band.depth_cm), 1.0, band.thickness_cm,
                               facecolor=band.color, edgecolor='none', alpha=alpha))
        if band.visible:
            ax.text(0.02, band.depth_cm + 0.02 * depth, f'{band.kind.value}  {band.depth_cm:.1f} cm',
                    fontsize=8, va='top', ha='left')
        if band.has_boundary:
            ax.axhline(band.depth_cm + band.thickness_cm, color='#666666', linestyle='--', linewidth=0.8)

    for overlay in layout.overlays:
        ax.axhline(overlay.depth_cm, color='gold', linewidth=1 + overlay.glow_spread, alpha=overlay.opacity)
        ax.text(0.98, overlay.depth_cm, overlay.label, fontsize=8, va='center', ha='right')

    ax.set_yticks([m.depth_cm for m in layout.markers])
    ax.set_yticklabels([m.label for m in layout.markers])
    ax.set_xlim(0.0, 1.0)
    ax.set_ylim(depth, 0.0)
    ax.set_xticks([])
    ax.set_ylabel('Depth')
    ax.set_title(f'{layout.frequency:g} MHz, display depth {depth:.1f} cm')

    if save:
        fig.savefig(save, bbox_inches='tight')
    if show:
        import matplotlib.pyplot as plt
        plt.show()
    return fig, ax
