from datetime import datetime, timezone

from src.config.settings import Settings
from src.wallet.bootstrap import build_wallet_service, ensure_data_dir
from src.wallet.time.frozen_time_source import FrozenTimeSource


def test_build_wallet_service_creates_data_dir(tmp_path):
    db_path = tmp_path / "data" / "wallet" / "wallet.db"
    settings = Settings(
        DATABASE_URL=f"sqlite:///{db_path}",
        WALLET_NAME="Gold",
        PUBLIC_FUNDS_ACCOUNT=7,
    )
    clock = FrozenTimeSource(datetime(2026, 1, 5, tzinfo=timezone.utc))

    service = build_wallet_service(settings, time_source=clock)
    service.adjust_public_funds(20)
    record = service.issuance_poverty_subsidies(1, 5)

    assert db_path.exists()
    assert service.get_wallet_name() == "Gold"
    assert service.get_public_funds_account_id() == 7
    assert service.get_balance(7) == 15
    assert record.time == "2026-01-05"
    service.database.dispose()


def test_balances_survive_restart(tmp_path):
    settings = Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'wallet.db'}")

    first = build_wallet_service(settings)
    first.adjust_balance(3, 11)
    first.set_wallet_name("Renamed")
    first.database.dispose()

    second = build_wallet_service(settings)
    assert second.get_balance(3) == 11
    # label is process-lifetime only
    assert second.get_wallet_name() == "Atri币"
    second.database.dispose()


def test_settings_read_from_environment(monkeypatch):
    monkeypatch.setenv("PUBLIC_FUNDS_ACCOUNT", "9")
    monkeypatch.setenv("WALLET_NAME", "Shells")

    settings = Settings()

    assert settings.PUBLIC_FUNDS_ACCOUNT == 9
    assert settings.WALLET_NAME == "Shells"


def test_in_memory_url_needs_no_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    ensure_data_dir("sqlite://")
    service = build_wallet_service(Settings(DATABASE_URL="sqlite://"))
    service.adjust_balance(1, 2)

    assert list(tmp_path.iterdir()) == []
    assert service.get_balance(1) == 2
    service.database.dispose()
