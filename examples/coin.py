"""Hand-built coin pickup: square blip with a one-shot pitch jump."""

import numpy as np

from sfx_synth import Patch, dump_patch, render, validate_patch

patch = Patch(
    wave_shape="square",
    base_frequency=0.55,
    duty=0.4,
    sustain_time=0.04,
    sustain_punch=0.45,
    decay_time=0.25,
    change_speed=0.6,
    change_amount=0.4,
)

if __name__ == "__main__":
    errors = validate_patch(patch)
    if errors:
        print("Validation errors:")
        for e in errors:
            print(f"  - {e}")
    else:
        print("Patch is valid.")
    print()
    print(dump_patch(patch))
    samples = render(patch)
    print(f"\nRendered {len(samples)} samples, peak {np.max(np.abs(samples)):.3f}")
