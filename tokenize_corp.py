import logging
import sys

logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
    )

from trainengine import BPEConfig, run


# An optional argument names a JSON config; defaults otherwise.
config = BPEConfig.from_json(sys.argv[1]) if len(sys.argv) > 1 else BPEConfig()

vocab = run(config)
print("Vocabulary size:", len(vocab))
