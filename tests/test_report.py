"""
Tests for the snapshot report pipeline.
"""

import pandas as pd

from rankcalc.history.report import process_snapshots


def write_snapshots(folder, name="mmr_snapshots_20250215.csv"):
    df = pd.DataFrame({
        'user_id': ['a', 'a', 'b'],
        'created_at': ['2025-01-01', '2025-02-15', '2025-02-10'],
        'current_rank': ['SILVER_1', 'GOLD_1', 'SILVER_1'],
        'estimated_glicko': [1400, 1710, 1440],
        'avg_rp_per_win': [18, 15, 16],
        'avg_rp_per_loss': [-10, -13, -9],
    })
    path = folder / name
    df.to_csv(path, index=False)
    return path


class TestProcessSnapshots:
    """Tests for process_snapshots."""

    def test_no_input_files(self, tmp_path):
        difficulty, user_stats = process_snapshots(folder=tmp_path)
        assert difficulty is None
        assert user_stats is None

    def test_writes_reports(self, tmp_path):
        write_snapshots(tmp_path)
        difficulty, user_stats = process_snapshots(folder=tmp_path)

        assert list(difficulty['rank_tier']) == ['SILVER_1', 'GOLD_1']
        assert difficulty.iloc[0]['sample_size'] == 2
        assert difficulty.iloc[0]['avg_glicko'] == 1420
        assert list(user_stats['user_id']) == ['a', 'b']

        assert (tmp_path / "rank_difficulty_20250215.csv").exists()
        assert (tmp_path / "user_mmr_stats_20250215.csv").exists()

    def test_removes_stale_reports(self, tmp_path):
        stale = tmp_path / "rank_difficulty_20240101.csv"
        stale.write_text("rank_tier\n")
        write_snapshots(tmp_path)
        process_snapshots(folder=tmp_path)
        assert not stale.exists()

    def test_uses_newest_file(self, tmp_path):
        write_snapshots(tmp_path, "mmr_snapshots_20250101.csv")
        newer = pd.DataFrame({
            'created_at': ['2025-03-01'],
            'current_rank': ['DIAMOND_1'],
            'estimated_glicko': [2100],
            'avg_rp_per_win': [14],
            'avg_rp_per_loss': [-14],
        })
        newer.to_csv(tmp_path / "mmr_snapshots_20250301.csv", index=False)

        difficulty, user_stats = process_snapshots(folder=tmp_path)
        assert list(difficulty['rank_tier']) == ['DIAMOND_1']
        assert user_stats.empty
