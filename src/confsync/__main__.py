import sys
import logging

logger = logging.getLogger("confsync")


def _load_config():
    from confsync.config import Config, default_config_path, load_config

    path = default_config_path()
    if not path.exists():
        print(f"No configuration at {path}, using defaults")
        return Config()
    return load_config(path)


def run_photo_sync(once: bool = False):
    """Run the photo sync from the command line.

    Photos are held in memory by this process only. With ``once`` the run is
    a check that the feed answers and pages as expected.
    """
    from confsync.logging_utils import setup_logging
    from confsync.photo_sync import PhotoSharingSync
    from confsync.rest import RestClient
    from confsync.scheduler import ScheduledRunner

    config = _load_config()
    setup_logging(config.log_dir, console=True)
    settings = config.photo_sharing

    print("confsync photo sync")
    print("=" * 40)

    with RestClient(timeout=config.conference.timeout) as rest:
        photo_sync = PhotoSharingSync(settings, rest)
        if once:
            pages = photo_sync.run()
            print(f"Feed check: fetched {pages} page(s), {photo_sync.storage.count()} photos downloaded")
            print("Photos are kept in memory only and are discarded on exit")
            return

        runner = ScheduledRunner(
            photo_sync.run,
            schedule_type=settings.schedule_type,
            initial_delay=settings.initial_delay,
            duration=settings.schedule_duration,
        )
        logger.info(
            "Scheduling photo sync %s every %ss after %ss",
            settings.schedule_type.value, settings.schedule_duration, settings.initial_delay,
        )
        try:
            runner.run_forever()
        except KeyboardInterrupt:
            runner.stop()


def run_app():
    """Launch the TUI application."""
    from confsync.app import ConfSyncApp
    from confsync.logging_utils import setup_logging

    config = _load_config()
    setup_logging(config.log_dir)
    app = ConfSyncApp(config)
    app.run()


def main():
    if len(sys.argv) > 1 and sys.argv[1] == "sync-photos":
        run_photo_sync(once="--once" in sys.argv[2:])
    else:
        run_app()


if __name__ == "__main__":
    main()
