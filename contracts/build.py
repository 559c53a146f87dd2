# contracts/build.py
import json, hashlib
from pathlib import Path
from pyteal import compileTeal, Mode
from job_contract import approval_program, clear_state_program

ARTIFACTS = Path(__file__).resolve().parent.parent / "artifacts"
TEAL_VERSION = 8

def sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()

def compile_programs() -> tuple[str, str]:
    approval_teal = compileTeal(approval_program(), mode=Mode.Application, version=TEAL_VERSION)
    clear_teal = compileTeal(clear_state_program(), mode=Mode.Application, version=TEAL_VERSION)
    return approval_teal, clear_teal

def main(artifacts: Path = ARTIFACTS) -> Path:
    artifacts.mkdir(parents=True, exist_ok=True)
    approval_teal, clear_teal = compile_programs()

    (artifacts / "approval.teal").write_text(approval_teal, encoding="utf-8")
    (artifacts / "clear.teal").write_text(clear_teal, encoding="utf-8")

    manifest = {
        "contract": "JobContract (id + counter)",
        "teal_version": TEAL_VERSION,
        "global_schema": {"num_uints": 2, "num_byte_slices": 1},
        "artifacts": {
            "approval": {"file": "approval.teal", "sha256": sha256_hex(approval_teal)},
            "clear": {"file": "clear.teal", "sha256": sha256_hex(clear_teal)},
        },
    }
    (artifacts / "contract.manifest.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    print("Wrote artifacts to", artifacts)
    return artifacts

if __name__ == "__main__":
    main()
