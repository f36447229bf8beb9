from logseq_markmap.cli import app

if __name__ == "__main__":
    app()
