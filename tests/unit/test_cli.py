"""
CLI Unit Tests
Tests for anchor_cli/
"""
import json

import pytest

from anchor_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)
from core.crypto.commit_reveal import commit
from core.crypto.hashing import general_hash, solidity_hash
from core.merkle import build_merkle_root
from core.schemas.stages import AiScoreRequest

from fixtures import make_ai_score_payload, make_purchase_payload


@pytest.fixture
def memory_config_file(tmp_path):
    path = tmp_path / "anchor.json"
    path.write_text(json.dumps({"storage": {"backend": "memory"}}))
    return path


class TestParser:

    def test_no_command(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_anchor_rejects_unknown_stage(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["anchor", "harvest", "--payload", "x.json"])


class TestHashCommand:

    def test_solidity(self, capsys):
        assert main(["hash", "--algo", "solidity", "hello"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == solidity_hash("hello")

    def test_general_json(self, capsys):
        assert main(["hash", "--algo", "general", "--json", "hello"]) == EXIT_SUCCESS
        out = json.loads(capsys.readouterr().out)
        assert out == {"algorithm": "sha256", "digest": general_hash("hello")}

    def test_stdin(self, capsys, monkeypatch):
        import io

        monkeypatch.setattr("sys.stdin", io.StringIO("hello"))
        assert main(["hash", "-"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == solidity_hash("hello")


class TestMerkleCommand:

    def test_root(self, capsys):
        assert main(["merkle", "leaf1", "leaf2", "leaf3"]) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == build_merkle_root(["leaf1", "leaf2", "leaf3"])

    def test_empty(self, capsys):
        assert main(["merkle", "--json"]) == EXIT_SUCCESS
        assert json.loads(capsys.readouterr().out)["leaf_count"] == 0

    def test_prove(self, capsys):
        assert main(["merkle", "a", "b", "c", "--prove", "2"]) == EXIT_SUCCESS
        proof = json.loads(capsys.readouterr().out)
        assert proof["leaf"] == "c"
        assert proof["index"] == 2
        assert proof["root"] == build_merkle_root(["a", "b", "c"])

    def test_prove_out_of_range(self, capsys):
        assert main(["merkle", "a", "--prove", "3"]) == EXIT_RUNTIME_ERROR


class TestVerifyCommitCommand:

    def _args(self, path, pair):
        return [
            "verify-commit",
            "--payload", str(path),
            "--nonce", pair.nonce,
            "--reveal-hash", pair.reveal_hash,
            "--commit-hash", pair.commit_hash,
        ]

    def test_valid(self, tmp_path, capsys):
        raw = make_ai_score_payload()
        path = tmp_path / "score.json"
        path.write_text(json.dumps(raw))
        pair = commit(AiScoreRequest.model_validate(raw))
        assert main(self._args(path, pair)) == EXIT_SUCCESS
        assert capsys.readouterr().out.strip() == "VALID"

    def test_invalid(self, tmp_path, capsys):
        pair = commit(AiScoreRequest.model_validate(make_ai_score_payload()))
        path = tmp_path / "score.json"
        path.write_text(json.dumps(make_ai_score_payload(confidence=0.5)))
        assert main(self._args(path, pair)) == EXIT_VERIFICATION_FAILED
        assert capsys.readouterr().out.strip() == "INVALID"

    def test_missing_file(self, tmp_path):
        pair = commit({"a": 1})
        assert main(self._args(tmp_path / "nope.json", pair)) == EXIT_RUNTIME_ERROR


class TestStorageCommands:

    def test_anchor_purchase(self, tmp_path, memory_config_file, capsys):
        path = tmp_path / "purchase.json"
        path.write_text(json.dumps(make_purchase_payload()))
        code = main(["--config", str(memory_config_file), "anchor", "purchase", "--payload", str(path)])
        assert code == EXIT_SUCCESS
        receipt = json.loads(capsys.readouterr().out)
        assert receipt["stage"] == "purchase"
        assert receipt["batch_id"] == "BATCH-001"
        assert receipt["ipfs_cid"].startswith("mem-")

    def test_anchor_invalid_payload(self, tmp_path, memory_config_file, capsys):
        path = tmp_path / "purchase.json"
        path.write_text(json.dumps({"batch_id": "B"}))
        code = main(["--config", str(memory_config_file), "anchor", "purchase", "--payload", str(path)])
        assert code == EXIT_RUNTIME_ERROR
        assert "VALIDATION_ERROR" in capsys.readouterr().err

    def test_fetch_unknown(self, memory_config_file, capsys):
        code = main(["--config", str(memory_config_file), "fetch", "mem-missing"])
        assert code == EXIT_RUNTIME_ERROR
        assert "NOT_FOUND" in capsys.readouterr().err


class TestConfigCommand:

    def test_show_masks_secret(self, tmp_path, capsys):
        path = tmp_path / "anchor.json"
        path.write_text(json.dumps({"storage": {"project_id": "id", "project_secret": "hunter2"}}))
        assert main(["--config", str(path), "config", "--show"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "hunter2" not in out
        assert json.loads(out)["storage"]["project_secret"] == "***"

    def test_bad_config_file(self, tmp_path):
        assert main(["--config", str(tmp_path / "missing.json"), "config", "--show"]) == EXIT_RUNTIME_ERROR
