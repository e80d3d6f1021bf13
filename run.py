import pygame, sys, argparse, logging
from sim.world import World
from sim.scenarios import SCENARIOS, SCENARIOS_BY_NAME
from sim.io import load_flights_csv
from autoagl.settings import (
    Settings, ATM_COLLISION_THRESHOLDS, VAC_COLLISION_THRESHOLDS, PARACHUTE_ALTITUDE_MULTIPLIERS,
)
import config
from viz.pygame_app import render


def load_scenario(key: str, flights=None):
    if flights and key in flights:
        return flights[key]
    if key in SCENARIOS_BY_NAME:
        return SCENARIOS_BY_NAME[key]()
    fn = SCENARIOS.get(key, SCENARIOS["1"])
    return fn()


def build_settings(args) -> Settings:
    return Settings(
        enabled=not args.disable,
        landed_preference=Settings.from_labels(landed=args.landed).landed_preference,
        atm_collision_s=ATM_COLLISION_THRESHOLDS.strict(args.atm_collision),
        vac_collision_s=VAC_COLLISION_THRESHOLDS.strict(args.vac_collision),
        parachute_multiplier=PARACHUTE_ALTITUDE_MULTIPLIERS.strict(args.parachute),
        path_projection=not args.no_projection,
    )


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument(
        "--input", "-i",
        help="CSV file with flight scenarios (see sim/io.py)",
        default=None,
    )
    parser.add_argument(
        "--scenario", "-s",
        help="scenario key (1-7), built-in name, or name from --input",
        default="1",
    )
    parser.add_argument("--log", default=config.LOG_PATH, help="CSV flight log path ('' = off)")
    parser.add_argument("--disable", action="store_true", help="turn automatic switching off")
    parser.add_argument("--landed", default="ASL", choices=["ASL", "AGL"],
                        help="altimeter mode when landed/splashed")
    parser.add_argument("--atm-collision", default=ATM_COLLISION_THRESHOLDS.default_label,
                        choices=ATM_COLLISION_THRESHOLDS.labels)
    parser.add_argument("--vac-collision", default=VAC_COLLISION_THRESHOLDS.default_label,
                        choices=VAC_COLLISION_THRESHOLDS.labels)
    parser.add_argument("--parachute", default=PARACHUTE_ALTITUDE_MULTIPLIERS.default_label,
                        choices=PARACHUTE_ALTITUDE_MULTIPLIERS.labels)
    parser.add_argument("--no-projection", action="store_true", help="disable path projection")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format=f"[{config.MOD_NAME}] %(levelname)s %(name)s: %(message)s",
    )

    flights = None
    if args.input:
        try:
            flights = load_flights_csv(args.input)
        except (OSError, RuntimeError) as e:
            print("Failed to load CSV:", e)

    settings = build_settings(args)
    world = World(load_scenario(args.scenario, flights), settings=settings, log_path=args.log or None)

    pygame.init()
    screen = pygame.display.set_mode((config.SCREEN_W, config.SCREEN_H))
    pygame.display.set_caption(config.MOD_NAME)
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("consolas,menlo,monospace", 16)

    scenario_keys = {getattr(pygame, f"K_{k}"): k for k in SCENARIOS}
    altimeter_button = pygame.Rect(0, 0, 0, 0)

    running = True
    while running:
        dt = clock.tick(int(1.0 / config.DT)) / 1000.0
        dt *= config.SPEED_MULTIPLIER

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.MOUSEBUTTONDOWN and e.button == 1:
                if altimeter_button.collidepoint(e.pos):
                    world.click_altimeter()
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE:
                    running = False

                elif e.key == pygame.K_SPACE:
                    world.toggle_pause()

                elif e.key == pygame.K_r:
                    world.reset(load_scenario(args.scenario, flights))

                elif e.key in scenario_keys:
                    args.scenario = scenario_keys[e.key]
                    world.reset(load_scenario(args.scenario))

                elif e.key == pygame.K_a:
                    world.click_altimeter()

                elif e.key == pygame.K_p:
                    world.arm_chutes()

                elif e.key == pygame.K_UP:
                    world.adjust_thrust(config.THRUST_STEP_MPS2)

                elif e.key == pygame.K_DOWN:
                    world.adjust_thrust(-config.THRUST_STEP_MPS2)

        # world step
        world.step(dt)

        altimeter_button = render(screen, font, world)
        pygame.display.flip()

    world.close()
    stats = world.monitor.summary()
    print(f"Switches: total={stats.total_switches} auto={stats.auto_switches} "
          f"user={stats.user_switches} overrides cleared={stats.overrides_cleared}")

    pygame.quit()
    sys.exit(0)


if __name__ == "__main__":
    main()
