"""profilekitのコマンドラインエントリポイント。"""

if __name__ == "__main__":
    import sys

    from profilekit.cli import main

    sys.exit(main())
