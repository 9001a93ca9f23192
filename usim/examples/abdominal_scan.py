"""
Frequency trade-off for the default abdominal stack: higher frequencies
resolve finer detail but reach less deep.
"""
import numpy as np

from usim import LayerStack, TransducerSettings, simulate, plot_stack


def solve_system():
    stack = LayerStack.default()
    frequencies = np.arange(1.0, 15.0 + 0.5, 0.5)

    print("Sweeping frequency...")
    grid = simulate(stack, frequency=frequencies, power=80)
    return stack, grid


if __name__ == '__main__':
    stack, grid = solve_system()
    print(grid.to_dataframe()[['frequency', 'axial_resolution_mm', 'penetration_depth_cm']])

    import matplotlib.pyplot as plt
    grid.plot('frequency', y='penetration_depth_cm')
    plot_stack(stack, settings=TransducerSettings(frequency=5.0, power=80))
    plt.show()
