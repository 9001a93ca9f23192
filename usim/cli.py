import argparse
import json
import logging
from typing import Any, Dict, List, Optional

import yaml

from usim import config
from usim.errors import InvalidConfiguration
from usim.logging_config import setup_logging

logger = logging.getLogger(__name__)


def _load_scene(path: str) -> Dict[str, Any]:
    try:
        with open(path, 'r', encoding='utf-8') as f:
            scene = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise InvalidConfiguration(f"Cannot parse scene file {path}: {e}") from e
    if scene is None:
        scene = {}
    if not isinstance(scene, dict):
        raise InvalidConfiguration(f"Scene file {path} must contain a mapping, got {type(scene).__name__}")
    return scene


def _jsonable(value: Any) -> Any:
    if hasattr(value, 'tolist'):
        return value.tolist()
    if hasattr(value, 'item'):
        return value.item()
    return str(value)


def _run_sim(args) -> List[Dict[str, Any]]:
    from usim.model.layer import LayerStack
    from usim.solve.simulate import simulate
    from usim.viz.layout import build_layout

    scene = _load_scene(args.scene)
    # Minimal schema: frequency, power and a list of {kind, thickness} layers
    layers = scene.get('layers')
    stack = LayerStack.default() if layers is None else LayerStack(layers=layers)
    frequency = scene.get('frequency', config.DEFAULT_FREQUENCY_MHZ)
    power = scene.get('power', config.DEFAULT_POWER_PERCENT)
    logger.info("Simulating %d layers at frequency=%s MHz, power=%s %%", len(stack), frequency, power)

    result = simulate(stack, frequency, power, clamp=args.clamp)
    if hasattr(result, 'to_dataframe'):
        return result.to_dataframe().to_dict(orient='records')

    payload = result.to_dict()
    payload['formatted'] = result.formatted()
    if args.layout:
        layout = build_layout(stack.clamped() if args.clamp else stack, result)
        payload['layout'] = {
            'bands': [{'kind': b.kind.value, 'color': b.color, 'top_percent': b.top_percent,
                       'height_percent': b.height_percent, 'visible': b.visible} for b in layout.bands],
            'markers': [m.label for m in layout.markers],
            'overlays': [{'depth_cm': o.depth_cm, 'top_percent': o.top_percent, 'label': o.label,
                          'opacity': o.opacity} for o in layout.overlays],
        }
    return [payload]


def _run_tissues() -> Dict[str, Dict[str, Any]]:
    from usim.model.tissue import TISSUE_TABLE
    return {
        kind.value: {
            'speed': p.speed,
            'attenuation': p.attenuation,
            'density': p.density,
            'impedance': p.impedance,
            'color': p.color,
            'default_thickness': p.default_thickness,
        }
        for kind, p in TISSUE_TABLE.items()
    }


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="usim", description="Layered-tissue ultrasound propagation model")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log debug output to stderr")
    parser.add_argument("--log-file", help="Also write the log to this file")
    sub = parser.add_subparsers(dest="cmd")

    p_sim = sub.add_parser("sim", help="Compute derived quantities for a YAML scene file")
    p_sim.add_argument("scene", help="Path to scene YAML file")
    p_sim.add_argument("--out", help="Output JSON file (list of records)")
    p_sim.add_argument("--clamp", action="store_true", help="Snap settings and thicknesses into the editable ranges")
    p_sim.add_argument("--layout", action="store_true", help="Include the normalized visual layout")

    sub.add_parser("tissues", help="Print the tissue property table")

    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    try:
        if args.cmd == "sim":
            payload = _run_sim(args)
        elif args.cmd == "tissues":
            payload = _run_tissues()
        else:
            parser.print_help()
            return 1
    except InvalidConfiguration as e:
        logger.error("Invalid configuration: %s", e)
        return 2

    text = json.dumps(payload, indent=2, default=_jsonable)
    if args.cmd == "sim" and args.out:
        with open(args.out, 'w', encoding='utf-8') as f:
            f.write(text)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
