import numpy as np

from loransac import AffineKernel, LoRansacParams, TranslationKernel, lo_ransac
from loransac.kernels import make_translation
from loransac.synth import make_correspondences
from loransac.utils import setup_logger


def main() -> None:
    logger = setup_logger("loransac")
    rng = np.random.default_rng(0)

    # True affine transform
    T_true = np.array(
        [[1.05, 0.02, 15.0],
         [-0.01, 0.98, -8.0],
         [0.0,  0.0,  1.0]],
        dtype=np.float64,
    )

    # 200 inliers with pixel noise + 80 wrong matches
    data = make_correspondences(T_true, 280, 80 / 280, rng, noise_sigma=0.8)

    res = lo_ransac(
        AffineKernel(data.pts0, data.pts1),
        threshold=3.0,
        rng=rng,
        params=LoRansacParams(max_iters=2000),
    )

    logger.info("T_true:\n%s", T_true)
    logger.info("T_est:\n%s", res.model)
    logger.info("num_inliers: %d / %d", res.num_inliers, data.pts0.shape[0])
    logger.info("rms_error: %.4f, iterations: %d", res.rms_error, res.iterations)

    # Same data set idea with a pure shift
    shift = make_correspondences(make_translation(4.0, -2.5), 150, 0.4, rng, noise_sigma=0.5)
    res_t = lo_ransac(TranslationKernel(shift.pts0, shift.pts1), threshold=2.0, rng=rng)
    logger.info("translation: tx=%.3f ty=%.3f, inliers=%d / %d",
                res_t.model[0, 2], res_t.model[1, 2], res_t.num_inliers, shift.pts0.shape[0])


if __name__ == "__main__":
    main()
