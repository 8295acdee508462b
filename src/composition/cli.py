#!/usr/bin/env python3
"""
Render a single document image from the command line.
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

from .asset_store import AssetPaths, AssetStore
from .config_manager import PlacementStrategy, ProfileConfig
from .exceptions import CompositionError
from .renderer import DocumentFields, DocumentRenderer


def build_parser() -> argparse.ArgumentParser:
    defaults = AssetPaths.from_env()
    parser = argparse.ArgumentParser(description='Render a document image from the template')
    parser.add_argument('--name', required=True, help='Name printed on the document')
    parser.add_argument('--address', required=True, help='Address printed on the document')
    parser.add_argument('--issuer', required=True, help='Issuer printed on the document')
    parser.add_argument('--output', '-o', default='document.png', help='Output PNG path')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for a reproducible render')
    parser.add_argument('--template', default=defaults.template, help='Template image path')
    parser.add_argument('--signature', default=defaults.signature, help='Signature image path')
    parser.add_argument('--watermark', default=defaults.watermark, help='Watermark image path')
    parser.add_argument('--font', default=defaults.font, help='TrueType font path')
    parser.add_argument('--profile', default=None,
                        help='Render profile YAML (defaults to RENDER_PROFILE_CONFIG)')
    parser.add_argument('--placement', choices=[s.value for s in PlacementStrategy], default=None,
                        help='Override the watermark placement strategy')
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        profile = ProfileConfig(args.profile).profile
        if args.placement:
            watermark = profile.watermark.model_copy(update={'placement': PlacementStrategy(args.placement)})
            profile = profile.model_copy(update={'watermark': watermark})

        assets = AssetStore.load(AssetPaths(
            template=args.template,
            signature=args.signature,
            watermark=args.watermark,
            font=args.font,
        ))
        renderer = DocumentRenderer(assets, profile)
        document = renderer.render(
            DocumentFields(
                name=args.name.strip(),
                address=args.address.strip(),
                issuer=args.issuer.strip(),
            ),
            seed=args.seed,
        )
    except CompositionError as e:
        logger.error(str(e))
        return 1

    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(document.data)
    logger.info(f"Wrote {document.width}x{document.height} document to {output}")
    return 0


if __name__ == '__main__':
    sys.exit(main())
