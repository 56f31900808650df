# scripts/post_rank_dr.py
# Takes the program id, mnemonic and rpc endpoint from the .env file
# (RANK_ORACLE_PROGRAM_ID, SEDA_MNEMONIC, SEDA_RPC_ENDPOINT).
from __future__ import annotations
import sys

from rank_oracle.post_rank_dr import main

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
