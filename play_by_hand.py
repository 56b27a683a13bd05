import klondike_gym # noqa
import gymnasium as gym

from klondike_gym.env import decode_action

env = gym.make("klondike-gym/Klondike-v0", render_mode="ansi")
observation, info = env.reset()

done = False
while not done:
    print(env.render())

    board = env.unwrapped.board
    for action in env.get_wrapper_attr('valid_actions')():
        print(f"  {action:4}: {decode_action(action, board)}")
    action = int(input("Enter action: "))
    obs, reward, terminated, truncated, info = env.step(action)
    done = terminated or truncated
    print(reward)

env.close()
