from pathlib import Path

import cv2
import numpy as np

from loransac import LineKernel, LoRansacParams, lo_ransac
from loransac.synth import make_line_points
from loransac.utils import setup_logger
from loransac.viz import draw_line_fit, draw_status_text


def main(output_dir: str | None = "outputs") -> None:
    logger = setup_logger("loransac")
    rng = np.random.default_rng(0)

    # y = -2x + 0.3, 30% outliers, sigma = 0.01
    gt = np.array([-2.0, 0.3], dtype=np.float64)
    sigma = 0.01
    data = make_line_points(300, 0.3, sigma, gt, rng)

    res = lo_ransac(
        LineKernel(data.xy),
        threshold=3.0 * sigma,
        rng=rng,
        params=LoRansacParams(max_iters=1000, confidence=0.99),
    )

    logger.info("ground truth [a, b]: %s", gt)
    logger.info("estimated  [a, b]: %s", res.model)
    logger.info("inliers: %d / %d (expected %d)", res.num_inliers, data.xy.shape[0], data.inliers.shape[0])
    logger.info("rms_error: %.5f, iterations: %d, confident: %s", res.rms_error, res.iterations, res.confidence_reached)

    if output_dir is None:
        return

    canvas = draw_line_fit(data.xy, res.model, res.inliers, gt_model=gt)
    canvas = draw_status_text(canvas, [
        f"a={res.model[0]:.4f} b={res.model[1]:.4f}",
        f"inliers={res.num_inliers}/{data.xy.shape[0]} iters={res.iterations}",
    ])
    out = Path(output_dir)
    out.mkdir(parents=True, exist_ok=True)
    path = out / "demo_line_fit.png"
    cv2.imwrite(str(path), canvas)
    logger.info("saved %s", path)


if __name__ == "__main__":
    main()
