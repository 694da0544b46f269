from features.proxy_monitor.infrastructure.cli import main


if __name__ == "__main__":
    main()
