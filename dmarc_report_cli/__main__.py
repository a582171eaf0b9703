import sys

from dmarc_report_cli.app import main

if __name__ == "__main__":
    main(sys.argv[1:])
