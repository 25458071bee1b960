from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from monster_vault.config import VaultConfig, build_vault
from monster_vault.core.errors import VaultError
from monster_vault.core.vault import Vault


def _cmd_list(vault: Vault, _args: argparse.Namespace) -> None:
    df = vault.table()
    if df.empty:
        print("Aucun monstre n'a été trouvé")
        return
    print(df.drop(columns=["fallback"]).to_string(index=False))


def _cmd_show(vault: Vault, args: argparse.Namespace) -> None:
    entry = vault.get_entry(int(args.id))
    print(json.dumps(entry.to_dict(), indent=2, ensure_ascii=False))


def _cmd_import(vault: Vault, args: argparse.Namespace) -> None:
    result = vault.import_from_path(Path(args.file))
    print(f"{result.imported_count} monstre(s) importé(s)")


def _cmd_import_srd(vault: Vault, _args: argparse.Namespace) -> None:
    result = vault.import_from_pack()
    print(f"{result.imported_count} monstre(s) importé(s)")


def _cmd_export(vault: Vault, args: argparse.Namespace) -> None:
    path = vault.export_to_path(args.file or Path(args.config.export_filename()))
    print(str(path))


def _cmd_clear(vault: Vault, args: argparse.Namespace) -> None:
    if not args.yes:
        raise SystemExit("Refusing to empty the vault without --yes")
    vault.clear()


def _cmd_delete(vault: Vault, args: argparse.Namespace) -> None:
    vault.delete(int(args.id))


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Manage the local monster vault.")
    p.add_argument("--store", type=str, default=None, help="Path to the vault JSON file.")
    p.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="List monsters with their derived stats.").set_defaults(func=_cmd_list)

    s = sub.add_parser("show", help="Show one monster (blueprint + derived).")
    s.add_argument("id", type=int)
    s.set_defaults(func=_cmd_show)

    s = sub.add_parser("import", help='Import a {"vault": [...]} or {"monster": {...}} JSON file.')
    s.add_argument("file", type=str)
    s.set_defaults(func=_cmd_import)

    sub.add_parser("import-srd", help="Import the bundled SRD monsters.").set_defaults(func=_cmd_import_srd)

    s = sub.add_parser("export", help="Export all blueprints to a JSON file.")
    s.add_argument("file", type=str, nargs="?", default=None)
    s.set_defaults(func=_cmd_export)

    s = sub.add_parser("clear", help="Delete every monster in the vault.")
    s.add_argument("--yes", action="store_true")
    s.set_defaults(func=_cmd_clear)

    s = sub.add_parser("delete", help="Delete one monster.")
    s.add_argument("id", type=int)
    s.set_defaults(func=_cmd_delete)

    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    args.config = VaultConfig(store_path=args.store) if args.store else VaultConfig()
    vault = build_vault(args.config)

    try:
        args.func(vault, args)
    except VaultError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
