"""
Script to generate a training sample set of random box massings.

## Usage:
```bash python gen_samples.py [config.json]

## Output:
- PNG images sample_0000.png, sample_0001.png, ... in the configured
  samples output directory (default 'Samples').

## Note:
- Without a config file the default EditorConfig is used.
- Set VOXFORM_LOG_LEVEL=DEBUG to see skipped boxes.
"""

import sys

from voxform.config import load_config
from voxform.editor import VoxelEditor
from voxform.models import EditorConfig
from voxform.utils.classes import summarize_state_array
from voxform.utils.logging import get_logger

logger = get_logger("gen_samples")

# ---- 1. Read Configuration ----
if len(sys.argv) > 1:
    logger.info("Reading configuration from: %s", sys.argv[1])
    cfg = load_config(sys.argv[1])
else:
    cfg = EditorConfig()

# ---- 2. Build the editing session ----
editor = VoxelEditor.from_config(cfg)
logger.info("Grid size %s, capacity %s, seed %s", editor.grid.size, editor.grid.capacity, cfg.seed)

# ---- 3. Generate ----
names = editor.generate_sample_set()
logger.info("Wrote %d samples to %s", len(names), cfg.samples.output_dir)

# ---- 4. Summary of the last sample ----
summarize_state_array(editor.grid.state_array())
