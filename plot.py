import sys, os
ROOT=os.path.dirname(__file__); SRC=os.path.join(ROOT,'src');
if SRC not in sys.path: sys.path.insert(0,SRC)

import numpy as np
import matplotlib.pyplot as plt

from blast.constants import MULTIPLIER_LEVELS, SIZE_BONUS_BREAKPOINTS
from blast.systems.score_system import score_delta

# Points per tap against group size, one line per combo tier.
group_sizes = np.arange(2, 21)

plt.figure(figsize=(7, 4))
for multiplier in MULTIPLIER_LEVELS:
    points = [score_delta(int(size), multiplier) for size in group_sizes]
    plt.plot(group_sizes, points, marker="o", markersize=3, label=f"x{multiplier:.1f}")
for min_count, bonus in SIZE_BONUS_BREAKPOINTS:
    plt.axvline(min_count, color="gray", linestyle=":")
plt.xlabel("Group size (cells)")
plt.ylabel("Points")
plt.title("Blast score by group size and combo multiplier")
plt.legend(title="Multiplier")
plt.grid(True)
plt.show()
