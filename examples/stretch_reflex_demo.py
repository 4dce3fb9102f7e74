"""
Stretch Reflex Demo

Drives two reflex circuits on an ankle model through a simple stepped loop:
a direct gain circuit on both calf muscles and a delayed interneuron circuit
on the soleus. The ankle is stretched by a ramp so the delayed response is
easy to see against the input.
"""

import torch

from myoreflex import (
    DelayConfig,
    GolgiTendon,
    InterneuronConfig,
    ModelRegistry,
    Muscle,
    ReflexCircuit,
    ReflexCircuitConfig,
    SimpleSpindle,
    SimulationState,
)


def build_ankle():
    """Soleus and gastrocnemius, each with a spindle and a golgi tendon organ."""
    model = ModelRegistry()
    soleus = Muscle("soleus", control_index=0, optimal_fiber_length=0.05, tendon_slack_length=0.25)
    gastroc = Muscle("gastrocnemius", control_index=1, optimal_fiber_length=0.06, tendon_slack_length=0.39)
    model.add_muscle(soleus)
    model.add_muscle(gastroc)
    model.add_spindle(SimpleSpindle("soleus_spindle", soleus, length_slot=0, speed_slot=1))
    model.add_spindle(SimpleSpindle("gastroc_spindle", gastroc, length_slot=3, speed_slot=4))
    model.add_golgi(GolgiTendon("soleus_golgi", soleus, tendon_slot=2))
    model.add_golgi(GolgiTendon("gastroc_golgi", gastroc, tendon_slot=5))
    return model.finalize()


def ramp_state(t, rate=0.02):
    """Both calf muscles lengthened at ``rate`` per unit time."""
    stretch = rate * t
    tendon = 0.5 * stretch
    data = torch.tensor([stretch, rate, tendon, stretch, rate, tendon], dtype=torch.float64)
    return SimulationState(time=t, sensordata=data)


def demo_stretch_reflex(dt=0.005, duration=0.1):
    print("=" * 60)
    print("Stretch Reflex Demo")
    print("=" * 60)

    model = build_ankle()

    calf_reflex = ReflexCircuit.with_gains("calf_reflex", "soleus", 1.0, 0.1, 0.5)
    delayed_reflex = ReflexCircuit(
        "soleus_delayed_reflex",
        "soleus",
        ReflexCircuitConfig(
            spindle_list=["soleus_spindle"],
            golgi_list=["soleus_golgi"],
            interneuron=InterneuronConfig(weights=[10.0, 1.0, 5.0], threshold=0.01),
            delay=DelayConfig(delay_time=0.03),
        ),
    )
    calf_reflex.connect_to_model(model)
    delayed_reflex.connect_to_model(model)

    print(f"{'time':>8} {'soleus':>10} {'gastroc':>10} {'delayed':>10}")
    n_steps = int(round(duration / dt)) + 1
    for k in range(n_steps):
        state = ramp_state(k * dt)
        controls = torch.zeros(2, dtype=torch.float64)
        calf_reflex.compute_controls(state, controls)
        signal = delayed_reflex.get_muscle_signal(state)
        print(f"{state.time:8.3f} {controls[0].item():10.4f} {controls[1].item():10.4f} {signal:10.4f}")

    print("\nDelay line:", delayed_reflex.get_diagnostics()["delay"])


if __name__ == "__main__":
    demo_stretch_reflex()
