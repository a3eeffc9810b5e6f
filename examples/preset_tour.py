"""Render one sound from every preset category and print a summary."""

import numpy as np

from sfx_synth import PRESETS, mutate, randomize_preset, render

if __name__ == "__main__":
    for name in sorted(PRESETS):
        patch = randomize_preset(name, seed=1)
        samples = render(patch)
        variant = render(mutate(patch, seed=1, amount=0.1))
        print(
            f"{name:10s} {patch.wave_shape:9s} {len(samples):6d} samples "
            f"peak {np.max(np.abs(samples)):.3f}  (mutated: {len(variant)} samples)"
        )
